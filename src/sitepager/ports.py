"""Collaborator protocols consumed by the aggregation core."""

import builtins
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from sitepager.types import ContextKey, DocumentRecord, RenderResult, SyntheticRenderRequest


@runtime_checkable
class ContentRepository(Protocol):
    """Holds collected documents for the lifetime of a build."""

    def get_by_directory(self, directory: str) -> builtins.list[DocumentRecord] | None:
        """Returns cached records scanned from ``directory`` or None on a cache miss."""
        ...

    def store(self, directory: str, records: builtins.list[DocumentRecord]) -> None: ...
    def get_by_pathname(self, pathname: str) -> DocumentRecord: ...
    def list_all(self) -> builtins.list[DocumentRecord]: ...


@runtime_checkable
class ContentScanner(Protocol):
    """Enumerates documents on disk."""

    async def scan(self, path: Path) -> builtins.list[DocumentRecord]:
        """Returns every document under ``path`` (recursively), ordered by pathname."""
        ...


@runtime_checkable
class RenderBridge(Protocol):
    """Template-rendering engine. Rendering may re-enter aggregation."""

    def has_template(self, template_id: str) -> bool: ...

    async def render(
        self,
        template_id: str,
        *,
        values: Mapping[str, Any],
        document: DocumentRecord,
        context_key: ContextKey | None = None,
        build_id: str | None = None,
    ) -> RenderResult | None: ...


@runtime_checkable
class RenderQueue(Protocol):
    """Append-only queue of synthetic pages awaiting a render pass."""

    async def enqueue(self, request: SyntheticRenderRequest) -> None: ...
