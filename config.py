"""
Environment configuration and logging setup shared by the API and the
command-line jobs.
"""

import os
import logging

from dotenv import load_dotenv

from models.config_models import AppSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Environment variable name -> AppSettings field
ENV_FIELDS = {
    "OPENAI_API_KEY": "openai_api_key",
    "PINECONE_API_KEY": "pinecone_api_key",
    "PINECONE_INDEX": "pinecone_index",
    "PINECONE_NAMESPACE": "pinecone_namespace",
    "HOST": "host",
    "PORT": "port",
    "EMBEDDING_MODEL": "embedding_model",
    "EMBEDDING_DIMENSION": "embedding_dimension",
    "MAX_EMBEDDING_CHARS": "max_embedding_chars",
    "VECTOR_BACKEND": "vector_backend",
    "DATABASE_URL": "database_url",
    "BATCH_SIZE": "batch_size",
    "BATCH_DELAY": "batch_delay",
    "MAX_BATCH_DELAY": "max_batch_delay",
    "LOG_LEVEL": "log_level",
}

def load_settings() -> AppSettings:
    """
    Load and validate settings from the environment (and a .env file, if any).

    Unset variables fall back to the AppSettings defaults.

    Returns:
        AppSettings: Validated settings object.
    """
    load_dotenv()
    raw = {}
    for env_name, field_name in ENV_FIELDS.items():
        value = os.getenv(env_name)
        if value is not None:
            raw[field_name] = value
    return AppSettings.model_validate(raw)

def configure_logging(level_name: str = "INFO") -> None:
    """
    Configure root logging for an entry point.

    Safe to call again once settings are known: later calls only change the level.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
