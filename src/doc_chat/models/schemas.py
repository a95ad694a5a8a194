"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from doc_chat.models.domain import Document


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    session_id: str | None = None
    user_email: str | None = None
    is_deep_think: bool = False
    keywords: list[str] | None = None


class DocumentIn(BaseModel):
    id: str = Field(min_length=1)
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Document:
        return Document(id=self.id, text=self.text, metadata=dict(self.metadata))


class IndexRequest(BaseModel):
    documents: list[DocumentIn]


class IndexResponse(BaseModel):
    documents: int
    chunks_created: int


class PathsResponse(BaseModel):
    user: str | None = None
    paths: list[str]


class HealthResponse(BaseModel):
    status: str
    indexed_chunks: int
    embedding_dimensions: int
    pipeline_steps: list[str]
