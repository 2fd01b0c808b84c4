"""Site build loop.

Renders every page under the pages directory, then drains the synthetic
render queue so that each queued page is rendered exactly once before the
build completes.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sitepager.aggregate import Aggregator
from sitepager.collector import DocumentCollector
from sitepager.config import SitepagerConfig
from sitepager.exceptions import PathNotFoundError
from sitepager.metadata import extract_metadata, metadata_tokens
from sitepager.planner import PaginationPlanner
from sitepager.rendering import JinjaRenderBridge, TemplateLoader
from sitepager.repository import InMemoryContentRepository
from sitepager.scanner import FileSystemScanner
from sitepager.store import ContextStore, InMemoryRenderQueue
from sitepager.types import BuildResult, ContextKey, DocumentRecord, SyntheticRenderRequest

logger = logging.getLogger(__name__)


class SiteBuilder:
    """Wires the collaborators of one build session and runs the build."""

    def __init__(self, config: SitepagerConfig, *, write: bool = True) -> None:
        self.config = config
        self.write = write

        paths = config.paths
        templates_dir = paths.abs_templates_dir if paths.abs_templates_dir.is_dir() else None

        self.repository = InMemoryContentRepository()
        self.scanner = FileSystemScanner(paths.abs_pages_dir)
        self.store = ContextStore()
        self.queue = InMemoryRenderQueue()
        self.bridge = JinjaRenderBridge(TemplateLoader(templates_dir))
        self.collector = DocumentCollector(paths.abs_pages_dir, self.repository, self.scanner)
        self.planner = PaginationPlanner(
            self.store, self.queue, index_filename=config.pagination.index_filename
        )
        self.aggregator = Aggregator(
            self.collector, self.bridge, self.planner, pagination_defaults=config.pagination
        )
        self.bridge.bind(self.aggregator)

    async def build(self) -> list[BuildResult]:
        """Build the whole site and return the rendered pages in render order."""
        pages_dir = self.config.paths.abs_pages_dir
        if not pages_dir.is_dir():
            raise PathNotFoundError(str(pages_dir))

        build_id = uuid.uuid4().hex
        self.repository.clear()
        pages = await self.scanner.scan(pages_dir)
        self.repository.store("/", pages)
        logger.info("Building %d pages from %s", len(pages), pages_dir)

        results: list[BuildResult] = []
        try:
            for page in pages:
                results.append(await self.render_document(page, build_id=build_id))

            while (request := await self.queue.pop()) is not None:
                results.append(await self.render_synthetic(request))
        finally:
            self.store.clear()
            dropped = await self.queue.drain()
            if dropped:
                logger.warning("Dropped %d synthetic pages of failed build %s", len(dropped), build_id)

        return results

    async def render_synthetic(self, request: SyntheticRenderRequest) -> BuildResult:
        document = DocumentRecord(content=request.content, path=request.path)
        return await self.render_document(
            document, build_id=request.build_id, seed=request.values, synthetic=True
        )

    async def render_document(
        self,
        document: DocumentRecord,
        *,
        build_id: str | None,
        seed: Mapping[str, Any] | None = None,
        synthetic: bool = False,
    ) -> BuildResult:
        seed = dict(seed or {})
        metadata = await extract_metadata(
            document.content,
            bridge=self.bridge,
            document=document,
            values=seed,
            context_key=ContextKey(document.pathname, "head"),
        )
        values = {**seed, **metadata_tokens(metadata)}
        html = await self.bridge.render_page(document, values=values, build_id=build_id)

        if self.write:
            await asyncio.to_thread(self._write, document.pathname, html)
        logger.info("Rendered %s%s", document.pathname, " (synthetic)" if synthetic else "")

        return BuildResult(path=document.path, html=html, synthetic=synthetic)

    def _write(self, pathname: str, html: str) -> None:
        output_file = self.output_path(pathname)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(html, encoding="utf-8")

    def output_path(self, pathname: str) -> Path:
        return self.config.paths.abs_output_dir / pathname.lstrip("/")
