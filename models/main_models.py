"""
Module containing data models used across the project.
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

MetadataValue = Union[str, int, float]

class Officer(BaseModel):
    """
    Represents one officer row attached to a company.
    """
    name: Optional[str] = None
    role: Optional[str] = None
    occupation: Optional[str] = None
    appointed_on: Optional[str] = None
    nationality: Optional[str] = None
    country_of_residence: Optional[str] = None

class CompanyRecord(BaseModel):
    """
    Represents a deduplicated company with the officers found across its rows.
    """
    company_number: str = Field(..., description="Registry number, unique per ingestion run")
    company_name: Optional[str] = Field(None, description="Company name")
    company_status: Optional[str] = Field(None, description="Registry status")
    officers: List[Officer] = Field(default_factory=list, description="Officers in row order")

class NormalizationResult(BaseModel):
    """
    Output of one normalization pass over a row stream.
    """
    companies: List[CompanyRecord] = Field(default_factory=list)
    rows_read: int = 0
    skipped_rows: int = 0

class IndexedRecord(BaseModel):
    """
    Represents a vector store record: id, embedding and flat metadata.
    """
    id: str = Field(..., description="'{category}-{company_number}'")
    values: List[float] = Field(..., description="Embedding vector")
    metadata: Dict[str, MetadataValue] = Field(..., description="Flat scalar metadata")

class QueryMatch(BaseModel):
    """
    A single nearest-neighbour match returned by a vector store.
    """
    id: str
    score: float
    metadata: Optional[Dict[str, Any]] = None

class IndexStats(BaseModel):
    """
    Index statistics, serialized with the API's camelCase names.
    """
    model_config = ConfigDict(populate_by_name=True)

    total_vectors: int = Field(0, alias="totalVectors")
    dimension: Optional[int] = Field(None, alias="dimension")
    index_fullness: Optional[float] = Field(None, alias="indexFullness")

class SearchQuery(BaseModel):
    """
    Body of a search request. The query is validated by the search service
    so that a missing value maps to a 400 instead of a schema error.
    """
    query: Optional[str] = None
    category: Optional[str] = None

class SearchResult(BaseModel):
    """
    A company as returned by the search endpoints.
    """
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field("N/A", alias="companyName")
    company_number: str = Field("N/A", alias="companyNumber")
    company_status: str = Field("unknown", alias="companyStatus")
    category: str = Field("unknown", alias="category")
    officer_count: int = Field(0, alias="officerCount")
    officers: str = Field("N/A", alias="officers")
    score: Optional[float] = Field(None, alias="score")

class SearchResponse(BaseModel):
    success: bool = True
    count: int
    results: List[SearchResult]

class CompanyResponse(BaseModel):
    success: bool = True
    company: SearchResult

class StatsResponse(BaseModel):
    success: bool = True
    stats: IndexStats

class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    message: str = "Server is running"
    pinecone_index: str = Field(..., alias="pineconeIndex")

class RecordFailure(BaseModel):
    """
    A company that could not be embedded or upserted during ingestion.
    """
    record_id: str
    error_kind: str = Field(..., description="'embedding', 'rate_limit' or 'upsert'")
    message: str = ""

class UpsertReport(BaseModel):
    """
    Outcome of one batch upsert run for a single category.
    """
    category: str
    total: int = 0
    processed: int = Field(0, description="Companies embedded successfully")
    upserted: int = Field(0, description="Companies written to the vector store")
    batches: int = 0
    failures: List[RecordFailure] = Field(default_factory=list)
