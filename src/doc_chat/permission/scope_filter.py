"""Knowledge-base scoped permission filtering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from doc_chat.exceptions import AccessDeniedError
from doc_chat.models.domain import AllowedScope, AllScope, SearchResult, SubsetScope
from doc_chat.observability.logger import get_logger

logger = get_logger("permission")


def filter_by_scope(results: Sequence[SearchResult], scope: AllowedScope) -> list[SearchResult]:
    """Keep results whose knowledge base the scope allows, preserving order."""
    if isinstance(scope, AllScope):
        return list(results)
    return [r for r in results if scope.allows(r.knowledge_base_id or None)]


class StaticPermissionFilter:
    """Resolves scopes from a fixed user → knowledge-base-ids mapping.

    Users absent from ``grants`` get ``default_scope``; when that is ``None``
    they are denied with ``AccessDeniedError``.
    """

    def __init__(
        self,
        grants: Mapping[str, Iterable[str]] | None = None,
        default_scope: AllowedScope | None = AllScope(),
    ) -> None:
        self._grants = {
            user.lower(): SubsetScope(ids) for user, ids in (grants or {}).items()
        }
        self._default_scope = default_scope

    async def allowed_scope(self, user_id: str) -> AllowedScope:
        scope = self._grants.get(user_id.lower())
        if scope is not None:
            return scope
        if self._default_scope is None:
            raise AccessDeniedError(f"No access scope configured for user '{user_id}'")
        return self._default_scope

    async def filter(self, results: list[SearchResult], user_id: str) -> list[SearchResult]:
        scope = await self.allowed_scope(user_id)
        filtered = filter_by_scope(results, scope)
        logger.info(
            "results_filtered",
            user=user_id,
            scope=repr(scope),
            before=len(results),
            after=len(filtered),
        )
        return filtered
