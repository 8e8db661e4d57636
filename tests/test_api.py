"""
Tests for the search endpoints, with the embedding provider and the vector
store replaced by in-memory fakes.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from models.config_models import AppSettings
from models.main_models import CompanyRecord, Officer
from services.pipeline import BatchUpsertPipeline

def ingest(embedder, store):
    pipeline = BatchUpsertPipeline(embedder, store, batch_delay=0)
    pipeline.run([
        CompanyRecord(
            company_number="123", company_name="Acme", company_status="active",
            officers=[Officer(name="Jane Doe"), Officer(name="Bob Roe")]
        ),
    ], "consumer-electronics")
    pipeline.run([
        CompanyRecord(company_number="456", company_name="Cure Labs", company_status="active"),
    ], "pharmaceutical")

def test_search(client, embedder, store):
    ingest(embedder, store)

    response = client.post("/api/search", json={"query": "gadgets"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["count"] == 2
    assert data["results"][0] == {
        "companyName": "Acme",
        "companyNumber": "123",
        "companyStatus": "active",
        "category": "consumer-electronics",
        "officerCount": 2,
        "officers": "Jane Doe, Bob Roe",
        "score": 0.99,
    }

def test_search_with_category(client, embedder, store):
    ingest(embedder, store)

    response = client.post("/api/search", json={"query": "medicine", "category": "pharmaceutical"})

    assert response.status_code == 200
    assert [r["companyNumber"] for r in response.json()["results"]] == ["456"]

def test_search_requires_query(client, embedder):
    response = client.post("/api/search", json={"category": "pharmaceutical"})

    assert response.status_code == 400
    assert response.json() == {"error": "Query is required"}
    assert embedder.calls == []

def test_search_upstream_failure(client, store):
    store.error = "quota exceeded"

    response = client.post("/api/search", json={"query": "anything"})

    assert response.status_code == 500
    assert response.json() == {"error": "Search failed", "message": "quota exceeded"}

def test_company_lookup(client, embedder, store):
    ingest(embedder, store)

    response = client.get("/api/company/123")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["company"]["companyNumber"] == "123"

def test_company_lookup_not_found(client):
    response = client.get("/api/company/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Company not found"}

def test_company_lookup_upstream_failure(client, store):
    store.error = "index unavailable"

    response = client.get("/api/company/123")

    assert response.status_code == 500
    assert response.json() == {"error": "Lookup failed", "message": "index unavailable"}

def test_search_without_body_is_a_missing_query(client, embedder):
    response = client.post("/api/search")

    assert response.status_code == 400
    assert response.json() == {"error": "Query is required"}
    assert embedder.calls == []

def test_missing_provider_credentials_are_reported():
    import main

    main.get_search_service.cache_clear()
    main.get_vector_store.cache_clear()
    with patch("main.get_settings", return_value=AppSettings()):
        client = TestClient(main.app)
        search = client.post("/api/search", json={"query": "gadgets"})
        stats = client.get("/api/stats")

    assert search.status_code == 500
    assert search.json()["error"] == "Embedding provider unavailable"
    assert "OPENAI_API_KEY" in search.json()["message"]
    assert stats.status_code == 500
    assert stats.json()["error"] == "Vector store unavailable"
    assert "PINECONE_API_KEY" in stats.json()["message"]
