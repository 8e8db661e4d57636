"""
Semantic search and identifier lookup over the company index.
"""

import logging
from typing import Any, Dict, List, Optional

from models.main_models import QueryMatch, SearchResult
from services.embeddings import EmbeddingClient
from services.errors import (
    CompanyNotFoundError,
    EmbeddingError,
    QueryValidationError,
    SearchError,
    StoreError,
)
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"

def _text(metadata: Dict[str, Any], key: str, default: str) -> str:
    value = metadata.get(key)
    if value is None or value == "":
        return default
    return str(value)

def to_search_result(match: QueryMatch) -> SearchResult:
    """
    Maps a raw store match to a SearchResult, defaulting missing metadata.
    """
    metadata = match.metadata or {}
    try:
        officer_count = int(metadata.get("officerCount") or 0)
    except (TypeError, ValueError):
        officer_count = 0
    return SearchResult(
        company_name=_text(metadata, "companyName", "N/A"),
        company_number=_text(metadata, "companyNumber", "N/A"),
        company_status=_text(metadata, "companyStatus", "unknown"),
        category=_text(metadata, "category", "unknown"),
        officer_count=officer_count,
        officers=_text(metadata, "officers", "N/A"),
        score=match.score
    )

def category_filter(category: Optional[str]) -> Optional[Dict[str, Any]]:
    if not category or category == ALL_CATEGORIES:
        return None
    return {"category": {"$eq": category}}

class SearchService:
    """
    Stateless search over injected embedding and vector store clients.
    """

    def __init__(self, embedder: EmbeddingClient, store: VectorStore,
                 top_k: int = 10, lookup_top_k: int = 5, namespace: str = ""):
        self.embedder = embedder
        self.store = store
        self.top_k = top_k
        self.lookup_top_k = lookup_top_k
        self.namespace = namespace

    def _query(self, text: str, top_k: int, filter=None) -> List[QueryMatch]:
        try:
            vector = self.embedder.embed(text)
            return self.store.query(
                vector,
                top_k=top_k,
                include_metadata=True,
                filter=filter,
                namespace=self.namespace
            )
        except (EmbeddingError, StoreError) as exc:
            raise SearchError(str(exc)) from exc

    def search_by_text(self, query: Optional[str], category: Optional[str] = None) -> List[SearchResult]:
        """
        Returns up to ``top_k`` companies ordered by descending similarity.

        Raises:
            QueryValidationError: If the query is missing or blank.
            SearchError: If the embedding provider or the store fails.
        """
        if not query or not query.strip():
            raise QueryValidationError("Query is required")
        logger.info("Searching for: \"%s\" in category: %s", query, category or ALL_CATEGORIES)
        matches = self._query(query, self.top_k, category_filter(category))
        return [to_search_result(match) for match in matches]

    def lookup_by_identifier(self, identifier: str) -> SearchResult:
        """
        Returns the single best match for a company number or name.

        The identifier is embedded like any query text, so the match is
        approximate: a partial number can still resolve to a company.

        Raises:
            CompanyNotFoundError: If the store returns no matches.
            SearchError: If the embedding provider or the store fails.
        """
        if not identifier or not identifier.strip():
            raise QueryValidationError("Identifier is required")
        logger.info("Looking up company: %s", identifier)
        matches = self._query(identifier, self.lookup_top_k)
        if not matches:
            raise CompanyNotFoundError("Company not found")
        return to_search_result(matches[0])
