"""Loads documents from a JSON file for startup indexing."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter

from doc_chat.exceptions import ConfigurationError
from doc_chat.models.domain import Document
from doc_chat.models.schemas import DocumentIn

_DOCUMENTS = TypeAdapter(list[DocumentIn])


def load_documents(path: str | Path) -> list[Document]:
    """Read a JSON array of ``{"id", "text", "metadata"}`` objects."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        documents = _DOCUMENTS.validate_python(raw)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot load seed documents from {path}: {e}") from e
    return [d.to_domain() for d in documents]
