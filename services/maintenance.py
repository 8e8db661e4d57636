"""
Operator actions on the vector index.
"""

import logging

from models.main_models import IndexStats
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)

def clear_namespace(store: VectorStore, namespace: str = "") -> None:
    """
    Deletes every record in the namespace.
    WARNING: This is a destructive operation!

    Raises:
        StoreError: If the store rejects the delete.
    """
    logger.info("Clearing vector index namespace '%s'...", namespace)
    store.delete_all(namespace=namespace)
    logger.info("Index namespace '%s' cleared", namespace)

def get_stats(store: VectorStore) -> IndexStats:
    return store.describe_index_stats()
