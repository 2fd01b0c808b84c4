"""Test helpers: site writers, context factories and a recording render bridge."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sitepager.aggregate import Aggregator
from sitepager.collector import DocumentCollector
from sitepager.planner import PaginationPlanner
from sitepager.repository import InMemoryContentRepository
from sitepager.store import ContextStore, InMemoryRenderQueue
from sitepager.types import ContextKey, DocumentPath, DocumentRecord, RenderContext, RenderResult

POST_SOURCE = (
    "<!DOCTYPE html><html><head><title>Post {i}</title>"
    '<meta name="title" content="Post {i}"><meta name="tag" content="{tag}">'
    "</head><body><p>Content {i}</p></body></html>\n"
)


def write_file(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_posts(pages: Path, directory: str = "blog", count: int = 5) -> None:
    for i in range(1, count + 1):
        tag = "even" if i % 2 == 0 else "odd"
        write_file(pages, f"{directory}/post-{i}.html", POST_SOURCE.format(i=i, tag=tag))


def make_context(
    pathname: str,
    *,
    build_id: str | None = "build-1",
    values: Mapping[str, Any] | None = None,
    content: str = "<html><body></body></html>",
    template_id: str = "blog-list",
    index: int = 0,
) -> RenderContext:
    return RenderContext(
        key=ContextKey(pathname, template_id, index),
        document=DocumentRecord(content=content, path=DocumentPath.from_pathname(pathname)),
        build_id=build_id,
        values=values or {},
    )


@dataclass
class RecordingBridge:
    """Render bridge double that echoes the title of each rendered item."""

    templates: set[str] = field(default_factory=lambda: {"post", "pagination"})
    calls: list[dict[str, Any]] = field(default_factory=list)

    def has_template(self, template_id: str) -> bool:
        return template_id in self.templates

    async def render(
        self,
        template_id: str,
        *,
        values: Mapping[str, Any],
        document: DocumentRecord,
        context_key: ContextKey | None = None,
        build_id: str | None = None,
    ) -> RenderResult | None:
        self.calls.append(
            {"template_id": template_id, "values": dict(values), "document": document, "key": context_key}
        )
        if template_id == "pagination":
            return RenderResult(children=[f"[page {values['current_page']}/{values['total_pages']}]"])
        return RenderResult(children=[f"<{values.get('meta_title')}>"])


@dataclass
class Session:
    repository: InMemoryContentRepository
    store: ContextStore
    queue: InMemoryRenderQueue
    bridge: RecordingBridge
    collector: DocumentCollector
    planner: PaginationPlanner
    aggregator: Aggregator

