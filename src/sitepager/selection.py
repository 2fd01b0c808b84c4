"""Filter/Sort Stage and Window Selector."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from functools import cmp_to_key

from sitepager.types import DocumentRecord, MetadataValue, MetaItem

Predicate = Callable[[MetaItem], bool]
Comparator = Callable[[Mapping[str, MetadataValue], Mapping[str, MetadataValue]], int]


def iter_meta_items(metadata: Mapping[str, MetadataValue]) -> Iterator[MetaItem]:
    """Yield one MetaItem per value; multi-valued keys yield one item per value."""
    for name, value in metadata.items():
        if isinstance(value, list):
            for content in value:
                yield MetaItem(name, content)
        else:
            yield MetaItem(name, value)


def matches(record: DocumentRecord, predicate: Predicate) -> bool:
    return any(predicate(item) for item in iter_meta_items(record.metadata))


def filter_and_sort(
    records: Sequence[DocumentRecord],
    *,
    predicate: Predicate | None = None,
    comparator: Comparator | None = None,
) -> list[DocumentRecord]:
    """Keep the records matching ``predicate`` and order them with ``comparator``.

    Both steps are stable and leave the input sequence untouched.
    """
    selected = list(records)
    if predicate is not None:
        selected = [record for record in selected if matches(record, predicate)]
    if comparator is not None:
        selected = sorted(selected, key=cmp_to_key(lambda a, b: comparator(a.metadata, b.metadata)))
    return selected


def exclude_filename(records: Sequence[DocumentRecord], filename: str) -> list[DocumentRecord]:
    """Drop every record whose filename equals ``filename``."""
    return [record for record in records if record.path.filename != filename]


@dataclass(frozen=True)
class Window:
    """Half-open slice ``[start, end)`` over the selected records."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def apply(self, records: Sequence[DocumentRecord]) -> list[DocumentRecord]:
        return list(records[self.start : self.end])


def select_window(length: int, *, offset: int = 0, limit: int | None = None, current_page: int = 1) -> Window:
    """Compute the visible window for one invocation.

    ``start = offset + (current_page - 1) * limit`` when a limit is set, clamped
    to ``length``; an out-of-range start yields an empty window.
    """
    start = offset
    if limit:
        start += (current_page - 1) * limit
    start = min(start, length)
    end = min(start + limit, length) if limit else length
    return Window(start, end)
