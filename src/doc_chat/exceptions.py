"""Custom exception hierarchy for the document chat engine."""


class DocChatError(Exception):
    """Base exception for all document chat errors."""


class ChunkingError(DocChatError):
    """Error during text chunking."""


class EmbeddingError(DocChatError):
    """Error generating embeddings."""


class SearchBackendError(DocChatError):
    """Search index unreachable or query malformed."""


class AccessDeniedError(DocChatError):
    """Caller is denied access or has no resolvable scope."""


class PipelineStepError(DocChatError):
    """A pipeline step failed or its precondition was violated."""

    def __init__(self, step_name: str, message: str) -> None:
        super().__init__(f"[{step_name}] {message}")
        self.step_name = step_name


class LLMStreamError(DocChatError):
    """Error during answer generation or token streaming."""


class ConfigurationError(DocChatError):
    """Error in system configuration or component wiring."""
