"""
Error taxonomy for ingestion, search and maintenance.
"""

class CompanySearchError(Exception):
    """Base class for errors raised by the services package."""

class QueryValidationError(CompanySearchError):
    """Missing or empty user input."""

class CompanyNotFoundError(CompanySearchError):
    """No match for an identifier lookup."""

class EmbeddingError(CompanySearchError):
    """
    The embedding provider failed.

    ``error_kind`` is ``"rate_limit"`` when the provider rejected the call
    for exceeding its rate limit and ``"embedding"`` otherwise.
    """

    def __init__(self, message: str, error_kind: str = "embedding"):
        super().__init__(message)
        self.error_kind = error_kind

class StoreError(CompanySearchError):
    """The vector store failed."""

class SearchError(CompanySearchError):
    """An upstream failure while serving a search or lookup."""
