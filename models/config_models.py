"""
Module containing configuration models for the search service and ingestion job.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

class AppSettings(BaseModel):
    """
    Runtime settings resolved from the environment.

    Attributes:
        openai_api_key: API key for the embedding provider.
        pinecone_api_key: API key for the Pinecone vector store.
        pinecone_index: Name of the vector index.
        pinecone_namespace: Namespace used for upserts, queries and deletes.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        embedding_model: Embedding model name.
        embedding_dimension: Dimension of the vectors produced by the model.
        max_embedding_chars: Embedding input is truncated to this many characters.
        vector_backend: Which vector store adapter to use.
        database_url: libpq connection string for the pgvector backend.
        batch_size: Number of companies embedded and upserted per batch.
        batch_delay: Base pause between batches, in seconds.
        max_batch_delay: Upper bound for the pause after rate-limited batches.
        log_level: Root logging level.
    """
    openai_api_key: Optional[str] = Field(
        None,
        description="API key for the embedding provider"
    )
    pinecone_api_key: Optional[str] = Field(
        None,
        description="API key for the Pinecone vector store"
    )
    pinecone_index: str = Field(
        "quickstart",
        description="Name of the vector index"
    )
    pinecone_namespace: str = Field(
        "",
        description="Namespace used for upserts, queries and deletes"
    )
    host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    port: int = Field(
        5001,
        description="Port the HTTP server listens on"
    )
    embedding_model: str = Field(
        "text-embedding-3-small",
        description="Embedding model name"
    )
    embedding_dimension: int = Field(
        1536,
        gt=0,
        description="Dimension of the vectors produced by the model"
    )
    max_embedding_chars: int = Field(
        8000,
        gt=0,
        description="Embedding input is truncated to this many characters"
    )
    vector_backend: Literal["pinecone", "pgvector"] = Field(
        "pinecone",
        description="Which vector store adapter to use"
    )
    database_url: Optional[str] = Field(
        None,
        description="libpq connection string for the pgvector backend"
    )
    batch_size: int = Field(
        100,
        gt=0,
        description="Number of companies embedded and upserted per batch"
    )
    batch_delay: float = Field(
        1.0,
        ge=0,
        description="Base pause between batches, in seconds"
    )
    max_batch_delay: float = Field(
        30.0,
        ge=0,
        description="Upper bound for the pause after rate-limited batches"
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level"
    )
