"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from doc_chat.indexing.pipeline import IndexingPipeline
from doc_chat.permission.scope_filter import StaticPermissionFilter
from doc_chat.pipeline.chat_pipeline import ChatPipeline
from doc_chat.retrieval.paths import PathEnumerator
from doc_chat.service.chat_service import ChatService
from doc_chat.storage.search_index import InMemorySearchIndex


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_indexing_pipeline(request: Request) -> IndexingPipeline:
    return request.app.state.indexing_pipeline


def get_path_enumerator(request: Request) -> PathEnumerator:
    return request.app.state.path_enumerator


def get_permission_filter(request: Request) -> StaticPermissionFilter:
    return request.app.state.permission_filter


def get_search_index(request: Request) -> InMemorySearchIndex:
    return request.app.state.search_index


def get_chat_pipeline(request: Request) -> ChatPipeline:
    return request.app.state.chat_pipeline
