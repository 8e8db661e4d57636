from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from openai import APIConnectionError, RateLimitError

from models.config_models import AppSettings
from services.embeddings import EmbeddingClient, build_embedding_client
from services.errors import EmbeddingError

EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"

def openai_client(vector=None, error=None):
    client = MagicMock()
    if error is not None:
        client.embeddings.create.side_effect = error
    else:
        client.embeddings.create.return_value = SimpleNamespace(
            data=[SimpleNamespace(embedding=vector)]
        )
    return client

def test_embed_returns_vector():
    client = openai_client(vector=[0.5, -0.25, 1.0])
    embedder = EmbeddingClient(client, model="text-embedding-3-small")

    assert embedder.embed("Company Name: Acme") == [0.5, -0.25, 1.0]
    client.embeddings.create.assert_called_once_with(
        model="text-embedding-3-small",
        input="Company Name: Acme",
        encoding_format="float"
    )

def test_long_input_is_truncated():
    client = openai_client(vector=[0.5])
    embedder = EmbeddingClient(client, max_input_chars=10)

    embedder.embed("x" * 50)

    assert client.embeddings.create.call_args.kwargs["input"] == "x" * 10

def test_provider_error_is_wrapped():
    request = httpx.Request("POST", EMBEDDINGS_URL)
    embedder = EmbeddingClient(openai_client(error=APIConnectionError(request=request)))

    with pytest.raises(EmbeddingError) as excinfo:
        embedder.embed("Acme")
    assert excinfo.value.error_kind == "embedding"
    assert "Connection error" in str(excinfo.value)

def test_rate_limit_is_reported_as_rate_limit():
    response = httpx.Response(429, request=httpx.Request("POST", EMBEDDINGS_URL))
    error = RateLimitError("Rate limit reached", response=response, body=None)
    embedder = EmbeddingClient(openai_client(error=error))

    with pytest.raises(EmbeddingError) as excinfo:
        embedder.embed("Acme")
    assert excinfo.value.error_kind == "rate_limit"

def test_empty_response_is_an_error():
    client = MagicMock()
    client.embeddings.create.return_value = SimpleNamespace(data=[])

    with pytest.raises(EmbeddingError):
        EmbeddingClient(client).embed("Acme")

def test_build_requires_api_key():
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        build_embedding_client(AppSettings(openai_api_key=None))

def test_build_uses_settings():
    embedder = build_embedding_client(AppSettings(
        openai_api_key="sk-test", embedding_model="text-embedding-3-large", max_embedding_chars=100
    ))

    assert embedder.model == "text-embedding-3-large"
    assert embedder.max_input_chars == 100
