"""Document Collector: resolves aggregation path specs into document records."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from sitepager.exceptions import EmptyResultError, PathNotFoundError
from sitepager.ports import ContentRepository, ContentScanner
from sitepager.types import DocumentRecord, format_pathname

logger = logging.getLogger(__name__)


def in_directory(dirname: str, target: str, *, recursive: bool) -> bool:
    """Return True when ``dirname`` is ``target`` or, if recursive, a descendant of it.

    Uses a path-prefix test, so ``/blog2`` is never inside ``/blog``.
    """
    if dirname == target:
        return True
    if not recursive:
        return False
    prefix = target if target.endswith("/") else target + "/"
    return dirname.startswith(prefix)


class DocumentCollector:
    """Collects a deduplicated, ordered list of documents for one aggregation call."""

    def __init__(self, content_root: Path, repository: ContentRepository, scanner: ContentScanner) -> None:
        self.content_root = Path(content_root)
        self.repository = repository
        self.scanner = scanner

    def resolve(self, spec: str) -> tuple[str, Path]:
        """Map a path spec to its site-relative directory and its location on disk."""
        target = format_pathname(spec)
        return target, self.content_root / target.lstrip("/")

    async def collect(self, paths: Sequence[str], *, recursive: bool = False) -> list[DocumentRecord]:
        """Collect documents from every path spec.

        Args:
            paths: Directory specs relative to the content root ('blog', '/blog/')
            recursive: Include documents in descendant directories

        Returns:
            Records in collection order, deduplicated by pathname

        Raises:
            PathNotFoundError: A spec does not resolve to an existing directory
            EmptyResultError: No spec produced any document

        """
        resolved = [self.resolve(spec) for spec in paths]

        # Every directory is checked before anything is collected.
        for _, directory in resolved:
            if not await asyncio.to_thread(directory.is_dir):
                raise PathNotFoundError(str(directory))

        collected: dict[str, DocumentRecord] = {}
        for target, directory in resolved:
            for record in await self._records_for(target, directory):
                if in_directory(record.path.dirname, target, recursive=recursive):
                    collected.setdefault(record.pathname, record)

        if not collected:
            raise EmptyResultError([str(directory) for _, directory in resolved])

        return list(collected.values())

    async def _records_for(self, target: str, directory: Path) -> list[DocumentRecord]:
        cached = self.repository.get_by_directory(target)
        if cached:
            logger.debug("Cache hit for %s (%d documents)", target, len(cached))
            return cached

        records = await self.scanner.scan(directory)
        self.repository.store(target, records)
        return records
