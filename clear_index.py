"""
Deletes every vector in one namespace of the configured index.
"""

import argparse
import logging
import sys
from typing import List

from config import configure_logging, load_settings
from services.errors import StoreError
from services.maintenance import clear_namespace
from services.vector_store import build_vector_store

logger = logging.getLogger(__name__)

def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Delete all vectors from the index")
    parser.add_argument("--namespace", help="Namespace to clear (defaults to PINECONE_NAMESPACE)")
    args = parser.parse_args(argv)

    configure_logging()
    try:
        settings = load_settings()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    configure_logging(settings.log_level)

    namespace = settings.pinecone_namespace if args.namespace is None else args.namespace
    try:
        clear_namespace(build_vector_store(settings), namespace)
    except (StoreError, ValueError) as e:
        logger.error("Error clearing index: %s", e)
        return 1
    logger.info("You can now run: python ingest.py")
    return 0

if __name__ == "__main__":
    sys.exit(main())
