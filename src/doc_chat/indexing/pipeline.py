"""Indexing pipeline: chunk -> embed -> add to the search index."""

from __future__ import annotations

from collections.abc import Iterable

from doc_chat.chunking.registry import ChunkerRegistry
from doc_chat.models.domain import Chunk, Document
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.embedder import Embedder
from doc_chat.storage.search_index import IndexEntry, InMemorySearchIndex

logger = get_logger("indexing")

_DOCUMENT_FIELDS = (
    "title", "path", "spaceKey", "knowledgeBaseId", "pageId", "webUrl", "downloadUrl", "type",
)


def keywords_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if str(v).strip())
    return str(value)


def chunk_to_entry(chunk: Chunk) -> IndexEntry:
    """Searchable fields and stored document for one chunk (vectors added later)."""
    meta = chunk.metadata
    document = {key: meta[key] for key in _DOCUMENT_FIELDS if meta.get(key) is not None}
    document["documentId"] = chunk.document_id
    document["keywords"] = keywords_text(meta.get("keywords"))
    # Sentence-window chunks are scored on the sentence but shown with neighbours.
    document["content"] = meta.get("windowContext") or chunk.text
    return IndexEntry(
        id=chunk.id,
        document=document,
        field_texts={
            "title": str(meta.get("title") or ""),
            "content": chunk.text,
            "path": str(meta.get("path") or ""),
            "keywords": document["keywords"],
        },
    )


class IndexingPipeline:
    def __init__(
        self,
        registry: ChunkerRegistry,
        embedder: Embedder,
        index: InMemorySearchIndex,
    ) -> None:
        self._registry = registry
        self._embedder = embedder
        self._index = index

    async def index_document(self, document: Document) -> int:
        """Index one document, superseding all of its earlier chunks.

        Returns the number of chunks added.
        """
        chunker = self._registry.chunker_for(document)
        chunks = await chunker.chunk(document)
        if not chunks:
            logger.info("no_chunks", doc_id=document.id, strategy=chunker.name)
            await self._index.replace_document(document.id, [])
            return 0

        entries = [chunk_to_entry(c) for c in chunks]
        entries = await self._embed_fields(entries)
        await self._index.replace_document(document.id, entries)
        logger.info("indexed", doc_id=document.id, strategy=chunker.name, chunks=len(chunks))
        return len(chunks)

    async def index_documents(self, documents: Iterable[Document]) -> int:
        total = 0
        for document in documents:
            total += await self.index_document(document)
        return total

    async def _embed_fields(self, entries: list[IndexEntry]) -> list[IndexEntry]:
        # Embed each distinct non-blank field text once.
        unique: list[str] = []
        seen: set[str] = set()
        for entry in entries:
            for text in entry.field_texts.values():
                if text.strip() and text not in seen:
                    seen.add(text)
                    unique.append(text)
        vectors = dict(zip(unique, await self._embedder.embed_texts(unique)))
        return [
            IndexEntry(
                id=e.id,
                document=e.document,
                field_texts=e.field_texts,
                field_vectors={
                    name: vectors[text]
                    for name, text in e.field_texts.items()
                    if text.strip()
                },
            )
            for e in entries
        ]
