"""HTTP API tests using the FastAPI test client."""

import pytest
from fastapi.testclient import TestClient

from doc_chat.api.app import create_app
from doc_chat.api.routes_chat import format_sse
from fakes import FakeLLM


def corpus_payload(corpus):
    return {
        "documents": [
            {"id": d.id, "text": d.text, "metadata": d.metadata} for d in corpus
        ]
    }


@pytest.fixture
def client(settings, hashing_embedder, corpus):
    app = create_app(settings, embedder=hashing_embedder, llm=FakeLLM())
    with TestClient(app) as test_client:
        response = test_client.post("/documents", json=corpus_payload(corpus))
        assert response.status_code == 200
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["indexed_chunks"] == 4
    assert data["embedding_dimensions"] == 64
    assert data["pipeline_steps"][-1] == "prompt_generation"
    assert "X-Request-ID" in response.headers


def test_index_documents_reports_chunks(client):
    response = client.post(
        "/documents",
        json={"documents": [{"id": "new", "text": "Office hours are nine to five."}]},
    )
    assert response.json() == {"documents": 1, "chunks_created": 1}
    assert client.get("/health").json()["indexed_chunks"] == 5


def test_index_rejects_malformed_payload(client):
    response = client.post("/documents", json={"documents": [{"text": "missing id"}]})
    assert response.status_code == 422


def test_chat_stream_sse(client):
    response = client.post(
        "/chat/stream",
        json={"message": "How do I request vacation?", "session_id": "s1"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    body = response.text
    assert body.count("event: token\n") == 3
    assert body.rstrip().endswith("event: done\ndata:")
    assert "data: Hello\n" in body


def test_chat_stream_rejects_empty_message(client):
    response = client.post("/chat/stream", json={"message": ""})
    assert response.status_code == 422


def test_chat_stream_reports_llm_failure(settings, hashing_embedder):
    app = create_app(settings, embedder=hashing_embedder, llm=FakeLLM(fail_after=1))
    with TestClient(app) as client:
        body = client.post("/chat/stream", json={"message": "hello"}).text
    assert body.count("event: token\n") == 1
    assert "event: error\n" in body
    assert "event: done" not in body


def test_paths_for_everyone(client):
    response = client.get("/paths")
    assert response.status_code == 200
    assert response.json()["user"] is None
    assert len(response.json()["paths"]) == 4


def test_paths_scoped_and_denied(settings, hashing_embedder, corpus):
    restricted = settings.model_copy(
        update={
            "permission_grants": {"bob@example.com": ["kb-fin"]},
            "permission_default": "none",
        }
    )
    app = create_app(restricted, embedder=hashing_embedder, llm=FakeLLM())
    with TestClient(app) as client:
        client.post("/documents", json=corpus_payload(corpus))
        scoped = client.get("/paths", params={"user": "bob@example.com"})
        denied = client.get("/paths", params={"user": "eve@example.com"})

    assert scoped.json() == {"user": "bob@example.com", "paths": ["Finance > Expenses"]}
    assert denied.status_code == 403


def test_format_sse_multiline():
    assert format_sse("token", "a\nb") == "event: token\ndata: a\ndata: b\n\n"
    assert format_sse("done", "") == "event: done\ndata: \n\n"
