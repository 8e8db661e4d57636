"""
This module implements the search API,
handling request validation, embedding calls and vector store queries.
"""

# =====================
# Imports and Global Setup
# =====================
import logging
from functools import lru_cache
from typing import Optional

import uvicorn
from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import configure_logging, load_settings
from models.config_models import AppSettings
from models.main_models import (
    CompanyResponse,
    HealthResponse,
    SearchQuery,
    SearchResponse,
    StatsResponse,
)
from services.embeddings import build_embedding_client
from services.errors import (
    CompanyNotFoundError,
    QueryValidationError,
    SearchError,
    StoreError,
)
from services.maintenance import get_stats
from services.search import SearchService
from services.vector_store import VectorStore, build_vector_store

logger = logging.getLogger(__name__)

app = FastAPI(title="Company Vector Search API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

class UpstreamFailure(Exception):
    """
    An upstream or configuration failure reported as a 500 with a label.
    """

    def __init__(self, error: str, exc: Exception):
        super().__init__(str(exc))
        self.error = error
        self.message = str(exc)

# =====================
# Error Responses
# =====================

@app.exception_handler(QueryValidationError)
async def validation_error_handler(request: Request, exc: QueryValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

@app.exception_handler(CompanyNotFoundError)
async def not_found_handler(request: Request, exc: CompanyNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

@app.exception_handler(UpstreamFailure)
async def upstream_failure_handler(request: Request, exc: UpstreamFailure):
    logger.error("%s: %s", exc.error, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.error, "message": exc.message}
    )

# =====================
# Dependencies
# =====================
# Clients are built once per process and shared read-only by all requests.

@lru_cache
def get_settings() -> AppSettings:
    """
    Returns the process settings.
    """
    try:
        return load_settings()
    except ValueError as exc:
        raise UpstreamFailure("Invalid configuration", exc) from exc

@lru_cache
def get_vector_store() -> VectorStore:
    """
    Returns the process vector store client.
    """
    try:
        return build_vector_store(get_settings())
    except (ValueError, StoreError) as exc:
        raise UpstreamFailure("Vector store unavailable", exc) from exc

@lru_cache
def get_search_service() -> SearchService:
    """
    Returns the search service wired to the process clients.
    """
    settings = get_settings()
    try:
        embedder = build_embedding_client(settings)
    except ValueError as exc:
        raise UpstreamFailure("Embedding provider unavailable", exc) from exc
    return SearchService(embedder, get_vector_store(), namespace=settings.pinecone_namespace)

# =====================
# API Endpoints
# =====================

@app.post("/api/search", response_model=SearchResponse)
def search_companies(
    body: Optional[SearchQuery] = None,
    service: SearchService = Depends(get_search_service)
):
    """
    Endpoint for semantic search, optionally restricted to one category.
    A missing body is treated like a missing query.
    """
    body = body or SearchQuery()
    try:
        results = service.search_by_text(body.query, body.category)
    except SearchError as exc:
        raise UpstreamFailure("Search failed", exc) from exc
    return SearchResponse(count=len(results), results=results)

@app.get("/api/company/{identifier}", response_model=CompanyResponse)
def lookup_company(
    identifier: str,
    service: SearchService = Depends(get_search_service)
):
    """
    Endpoint returning the best match for a company number or name.
    """
    try:
        company = service.lookup_by_identifier(identifier)
    except SearchError as exc:
        raise UpstreamFailure("Lookup failed", exc) from exc
    return CompanyResponse(company=company)

@app.get("/api/health", response_model=HealthResponse)
def health(settings: AppSettings = Depends(get_settings)):
    """
    Health check endpoint.
    """
    return HealthResponse(pinecone_index=settings.pinecone_index)

@app.get("/api/stats", response_model=StatsResponse)
def index_stats(store: VectorStore = Depends(get_vector_store)):
    """
    Endpoint returning vector index statistics.
    """
    try:
        stats = get_stats(store)
    except StoreError as exc:
        raise UpstreamFailure("Failed to get stats", exc) from exc
    return StatsResponse(stats=stats)

if __name__ == "__main__":
    run_settings = load_settings()
    configure_logging(run_settings.log_level)
    logger.info("Pinecone index: %s", run_settings.pinecone_index)
    uvicorn.run(app, host=run_settings.host, port=run_settings.port)
