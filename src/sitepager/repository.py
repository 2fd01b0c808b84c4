"""In-memory content repository."""

from __future__ import annotations

import logging

from sitepager.exceptions import DocumentNotFoundError
from sitepager.types import DocumentRecord, format_pathname

logger = logging.getLogger(__name__)


class InMemoryContentRepository:
    """Caches scanned documents by directory and by pathname.

    Records are shared between aggregation calls of one build and are never
    mutated here.
    """

    def __init__(self) -> None:
        self._by_directory: dict[str, list[DocumentRecord]] = {}
        self._by_pathname: dict[str, DocumentRecord] = {}

    def get_by_directory(self, directory: str) -> list[DocumentRecord] | None:
        records = self._by_directory.get(format_pathname(directory))
        if records is None:
            return None
        return list(records)

    def store(self, directory: str, records: list[DocumentRecord]) -> None:
        key = format_pathname(directory)
        self._by_directory[key] = list(records)
        for record in records:
            self._by_pathname[record.pathname] = record
        logger.debug("Cached %d documents for %s", len(records), key)

    def get_by_pathname(self, pathname: str) -> DocumentRecord:
        record = self._by_pathname.get(format_pathname(pathname))
        if record is None:
            raise DocumentNotFoundError(pathname)
        return record

    def list_all(self) -> list[DocumentRecord]:
        return sorted(self._by_pathname.values(), key=lambda record: record.pathname)

    def clear(self) -> None:
        self._by_directory.clear()
        self._by_pathname.clear()
