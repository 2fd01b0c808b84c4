"""Build-scoped pagination state and the synthetic render queue."""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from sitepager.types import ContextKey, PaginationState, SyntheticRenderRequest

logger = logging.getLogger(__name__)


class ContextStore:
    """Maps render slots to their pagination state for one build session.

    A key is written by the single render slot it identifies, so plain dict
    operations are enough. Entries live until :meth:`clear`.
    """

    def __init__(self) -> None:
        self._states: dict[ContextKey, PaginationState] = {}
        self._scheduled: set[tuple[str | None, str]] = set()

    def get(self, key: ContextKey) -> PaginationState | None:
        return self._states.get(key)

    def set(self, key: ContextKey, state: PaginationState) -> None:
        self._states[key] = state

    def __contains__(self, key: object) -> bool:
        return key in self._states

    def __len__(self) -> int:
        return len(self._states)

    def claim_synthetic(self, build_id: str | None, pathname: str) -> bool:
        """Reserve a synthetic pathname for a build. False if it was already reserved."""
        marker = (build_id, pathname)
        if marker in self._scheduled:
            return False
        self._scheduled.add(marker)
        return True

    def clear(self) -> None:
        self._states.clear()
        self._scheduled.clear()


class InMemoryRenderQueue:
    """Append-only queue of synthetic render requests.

    Safe for concurrent enqueue from several in-flight aggregations; each
    request is handed out exactly once by :meth:`pop` or :meth:`drain`.
    """

    def __init__(self) -> None:
        self._pending: deque[SyntheticRenderRequest] = deque()
        self._lock = asyncio.Lock()

    async def enqueue(self, request: SyntheticRenderRequest) -> None:
        async with self._lock:
            self._pending.append(request)
        logger.debug("Queued synthetic page %s", request.path.pathname)

    async def pop(self) -> SyntheticRenderRequest | None:
        async with self._lock:
            if not self._pending:
                return None
            return self._pending.popleft()

    async def drain(self) -> list[SyntheticRenderRequest]:
        async with self._lock:
            requests = list(self._pending)
            self._pending.clear()
        return requests

    def __len__(self) -> int:
        return len(self._pending)
