"""
Shared fakes for the embedding provider and the vector store.
"""

import pytest
from fastapi.testclient import TestClient

from models.config_models import AppSettings
from models.main_models import IndexStats, QueryMatch
from services.errors import EmbeddingError, StoreError
from services.search import SearchService
from services.vector_store import VectorStore

class FakeEmbedder:
    """Returns a fixed vector and records every text it was asked to embed."""

    def __init__(self, fail_on=(), rate_limit_on=()):
        self.calls = []
        self.fail_on = set(fail_on)
        self.rate_limit_on = set(rate_limit_on)

    def embed(self, text):
        self.calls.append(text)
        for token in self.rate_limit_on:
            if token in text:
                raise EmbeddingError("Rate limit reached", error_kind="rate_limit")
        for token in self.fail_on:
            if token in text:
                raise EmbeddingError(f"cannot embed {token}")
        return [0.5, 0.25, 0.125]

class FakeStore(VectorStore):
    """In-memory store; query returns records in insertion order."""

    def __init__(self, fail_upserts=0, error=None):
        self.records = {}
        self.upsert_calls = []
        self.query_calls = []
        self.deleted_namespaces = []
        self.fail_upserts = fail_upserts
        self.error = error

    def upsert(self, records, namespace=""):
        self.upsert_calls.append([record.id for record in records])
        if self.fail_upserts:
            self.fail_upserts -= 1
            raise StoreError("upsert rejected")
        for record in records:
            self.records[(namespace, record.id)] = record

    def query(self, vector, top_k, include_metadata=True, filter=None, namespace=""):
        self.query_calls.append({"vector": vector, "top_k": top_k, "filter": filter})
        if self.error:
            raise StoreError(self.error)
        matches = []
        for (record_namespace, _), record in self.records.items():
            if record_namespace != namespace:
                continue
            if filter and any(record.metadata.get(field) != cond["$eq"] for field, cond in filter.items()):
                continue
            matches.append(record)
        return [
            QueryMatch(id=record.id, score=round(0.99 - position * 0.01, 2), metadata=dict(record.metadata))
            for position, record in enumerate(matches[:top_k])
        ]

    def delete_all(self, namespace=""):
        if self.error:
            raise StoreError(self.error)
        self.deleted_namespaces.append(namespace)
        self.records = {key: value for key, value in self.records.items() if key[0] != namespace}

    def describe_index_stats(self):
        if self.error:
            raise StoreError(self.error)
        return IndexStats(total_vectors=len(self.records), dimension=3, index_fullness=0.0)

@pytest.fixture
def embedder():
    return FakeEmbedder()

@pytest.fixture
def store():
    return FakeStore()

@pytest.fixture
def client(embedder, store):
    """TestClient with the process clients replaced by fakes."""
    import main

    main.app.dependency_overrides[main.get_settings] = lambda: AppSettings(pinecone_index="test-index")
    main.app.dependency_overrides[main.get_vector_store] = lambda: store
    main.app.dependency_overrides[main.get_search_service] = lambda: SearchService(embedder, store)
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()

def company_row(number, name=None, status=None, officer=None, role=None, **extra):
    row = {
        "Company Number": number,
        "Company Name": name or "",
        "Company Status": status or "",
        "Officer Name": officer or "",
        "Officer Role": role or "",
    }
    row.update(extra)
    return row
