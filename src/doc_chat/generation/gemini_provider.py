"""Google Gemini LLM provider using the google-genai SDK."""

from __future__ import annotations

from collections.abc import AsyncIterator

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from doc_chat.exceptions import LLMStreamError
from doc_chat.observability.logger import get_logger

logger = get_logger("gemini")


class GeminiProvider:
    """Answer streaming plus schema-constrained generation for classification.

    Every SDK failure surfaces as ``LLMStreamError``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.3,
        max_tokens: int = 4096,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate_structured(
        self,
        prompt: str,
        response_schema: type[BaseModel],
        system: str | None = None,
    ) -> BaseModel:
        config = _config(
            system,
            temperature=0.0,
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model, contents=prompt, config=config
            )
        except Exception as e:
            raise LLMStreamError(f"Gemini structured generation failed: {e}") from e

        if isinstance(response.parsed, response_schema):
            return response.parsed
        try:
            return response_schema.model_validate_json(response.text or "")
        except ValidationError as e:
            raise LLMStreamError(
                f"Gemini returned output not matching {response_schema.__name__}: {e}"
            ) from e

    async def stream_completion(self, prompt: str) -> AsyncIterator[str]:
        config = _config(
            None, temperature=self._temperature, max_output_tokens=self._max_tokens
        )
        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=self._model, contents=prompt, config=config
            )
        except Exception as e:
            raise LLMStreamError(f"Gemini stream could not start: {e}") from e

        emitted = 0
        try:
            async for chunk in stream:
                if chunk.text:
                    emitted += 1
                    yield chunk.text
        except Exception as e:
            raise LLMStreamError(f"Gemini stream failed after {emitted} chunks: {e}") from e
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            logger.debug("gemini_stream_closed", model=self._model, chunks=emitted)


def _config(system: str | None, **options) -> types.GenerateContentConfig:
    if system:
        options["system_instruction"] = system
    return types.GenerateContentConfig(**options)
