"""Single-producer, multi-subscriber token channel with bounded buffers."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Literal

from doc_chat.exceptions import DocChatError, LLMStreamError
from doc_chat.observability.logger import get_logger

logger = get_logger("broadcaster")

OverflowPolicy = Literal["block", "drop_oldest"]


@dataclass(frozen=True)
class _End:
    error: DocChatError | None = None


class Subscription:
    """Async iterator over the broadcast tokens for one consumer."""

    def __init__(self, broadcaster: TokenBroadcaster, buffer_size: int) -> None:
        self._broadcaster = broadcaster
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=buffer_size)
        self.dropped = 0
        self.closed = False

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> str:
        if self.closed:
            raise StopAsyncIteration
        item = await self.queue.get()
        if isinstance(item, _End):
            self.closed = True
            if item.error is not None:
                raise item.error
            raise StopAsyncIteration
        return item

    async def aclose(self) -> None:
        if not self.closed:
            self.closed = True
            await self._broadcaster.unsubscribe(self)


class TokenBroadcaster:
    """Relays tokens from ``source`` to every subscriber.

    With ``block`` a full subscriber buffer pauses the producer; with
    ``drop_oldest`` the oldest buffered token is discarded instead. When the
    last subscriber leaves, the producer is cancelled and the source closed.
    Source failures reach every subscriber as one ``LLMStreamError``.
    """

    def __init__(
        self,
        source: AsyncIterator[str],
        buffer_size: int = 64,
        overflow: OverflowPolicy = "block",
    ) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        if overflow not in ("block", "drop_oldest"):
            raise ValueError(f"Unknown overflow policy '{overflow}'")
        self._source = source
        self._buffer_size = buffer_size
        self._overflow = overflow
        self._subscribers: list[Subscription] = []
        self._task: asyncio.Task | None = None
        self.published = 0

    def subscribe(self) -> Subscription:
        if self._task is not None:
            raise RuntimeError("Subscribe before starting the broadcaster")
        subscription = Subscription(self, self._buffer_size)
        self._subscribers.append(subscription)
        return subscription

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._produce())
        return self._task

    @property
    def dropped(self) -> int:
        return sum(s.dropped for s in self._subscribers)

    async def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
        _drain(subscription.queue)
        if not self._subscribers and self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("producer_cancelled", published=self.published)

    async def _produce(self) -> None:
        end = _End()
        try:
            async for token in self._source:
                self.published += 1
                await self._publish(token)
        except DocChatError as e:
            end = _End(error=e)
        except Exception as e:
            end = _End(error=LLMStreamError(f"Token stream failed: {e}"))
        finally:
            aclose = getattr(self._source, "aclose", None)
            if aclose is not None:
                await aclose()
        if end.error is not None:
            logger.warning("token_stream_failed", published=self.published, error=str(end.error))
        await self._publish(end)

    async def _publish(self, item) -> None:
        for subscription in list(self._subscribers):
            queue = subscription.queue
            if self._overflow == "drop_oldest":
                if queue.full():
                    queue.get_nowait()
                    subscription.dropped += 1
                queue.put_nowait(item)
            else:
                await queue.put(item)


def _drain(queue: asyncio.Queue) -> None:
    while not queue.empty():
        queue.get_nowait()
