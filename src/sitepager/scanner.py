"""File-system scanner producing document records."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from sitepager.metadata import parse_meta
from sitepager.types import DocumentPath, DocumentRecord

logger = logging.getLogger(__name__)


class FileSystemScanner:
    """Enumerates ``*.html`` documents below the content root.

    Pathnames are reported relative to ``content_root`` so that
    ``<root>/blog/post-1.html`` becomes ``/blog/post-1.html``.
    """

    def __init__(self, content_root: Path, pattern: str = "*.html") -> None:
        self.content_root = Path(content_root)
        self.pattern = pattern

    async def scan(self, path: Path) -> list[DocumentRecord]:
        """Scan ``path`` recursively and return its documents ordered by pathname."""
        files = await asyncio.to_thread(self._list_files, Path(path))
        records = []
        for file in files:
            content = await asyncio.to_thread(file.read_text, encoding="utf-8")
            records.append(self.to_record(file, content))
        logger.debug("Scanned %d documents under %s", len(records), path)
        return records

    def _list_files(self, path: Path) -> list[Path]:
        if not path.is_dir():
            return []
        return sorted(file for file in path.rglob(self.pattern) if file.is_file())

    def to_record(self, file: Path, content: str) -> DocumentRecord:
        relative = file.relative_to(self.content_root).as_posix()
        return DocumentRecord(
            content=content,
            path=DocumentPath.from_pathname(relative),
            metadata=parse_meta(content),
        )
