"""Pagination Planner.

Per render slot the planner moves through ``UNSEEN -> PLANNED -> RESOLVED``:
the first invocation computes a :class:`PaginationState`, stores it in the
:class:`ContextStore` and, for the root page of a series, queues pages
``2..N``. Every later invocation for the same slot is a plain lookup.

Output naming follows the shape of the series' root document:

* ``/index.html``      -> ``/page/2.html``       (prefix ``/``)
* ``/blog.html``       -> ``/blog/page/2.html``  (prefix ``/blog/``)
* ``/blog/index.html`` -> ``/blog/page/2.html``  (prefix ``/blog/``)

The naming is derived once from the root and carried to the synthetic pages
in their seed values, so a synthetic page never re-derives it from its own
path.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sitepager.ports import RenderQueue
from sitepager.selection import select_window
from sitepager.store import ContextStore
from sitepager.types import (
    DocumentPath,
    PaginationOptions,
    PaginationState,
    RenderContext,
    SyntheticRenderRequest,
    format_pathname,
)

logger = logging.getLogger(__name__)

SEED_SYNTHETIC = "pagination_synthetic"
SEED_BASE_URL = "pagination_base_url"
SEED_URL_PREFIX = "pagination_url_prefix"
SEED_TARGET_DIR = "pagination_target_dir"
SEED_ROOT_PATHNAME = "pagination_root_pathname"


def parse_current_page(pathname: str, segment: str) -> int | None:
    """Return N when ``pathname`` ends with ``/<segment>/<N>`` (optionally ``.html``)."""
    pattern = rf"/{re.escape(segment)}/(\d+)(?:\.html)?$"
    match = re.search(pattern, pathname)
    if match is None:
        return None
    return int(match.group(1))


def count_pages(total_items: int, limit: int) -> int:
    return math.ceil(total_items / limit)


@dataclass(frozen=True)
class PageGeometry:
    """Output directory and URLs shared by every page of one series."""

    root_pathname: str
    base_url: str
    url_prefix: str
    target_dir: str

    def synthetic_pathname(self, segment: str, page: int) -> str:
        return format_pathname(self.target_dir, segment, f"{page}.html")

    def seed_values(self) -> dict[str, Any]:
        return {
            SEED_SYNTHETIC: True,
            SEED_ROOT_PATHNAME: self.root_pathname,
            SEED_BASE_URL: self.base_url,
            SEED_URL_PREFIX: self.url_prefix,
            SEED_TARGET_DIR: self.target_dir,
        }


def derive_geometry(path: DocumentPath, index_filename: str = "index.html") -> PageGeometry:
    """Compute the series geometry from the root document's path."""
    if path.filename == index_filename:
        target_dir = path.dirname
    else:
        target_dir = format_pathname(path.dirname, path.stem)
    return PageGeometry(
        root_pathname=path.pathname,
        base_url=path.pathname,
        url_prefix=target_dir.rstrip("/") + "/",
        target_dir=target_dir,
    )


def geometry_from_values(values: Mapping[str, Any]) -> PageGeometry | None:
    """Recover the geometry a root invocation seeded into a synthetic page."""
    if not values.get(SEED_SYNTHETIC):
        return None
    return PageGeometry(
        root_pathname=values[SEED_ROOT_PATHNAME],
        base_url=values[SEED_BASE_URL],
        url_prefix=values[SEED_URL_PREFIX],
        target_dir=values[SEED_TARGET_DIR],
    )


def series_root(context: RenderContext) -> DocumentPath:
    """Path of the page-1 document of the series ``context`` belongs to."""
    root_pathname = context.values.get(SEED_ROOT_PATHNAME)
    if root_pathname:
        return DocumentPath.from_pathname(root_pathname)
    return context.document.path


def pagination_tokens(state: PaginationState, options: PaginationOptions) -> dict[str, Any]:
    """Token values handed to the pagination-control template."""
    return {
        "current_page": state.current_page,
        "total_pages": state.total_pages,
        "base_url": state.base_url,
        "url_prefix": state.url_prefix,
        "segment": state.segment,
        "max_visible": state.max_visible,
        "aria_label": options.aria_label,
        "ellipsis": options.ellipsis,
        "page_url": state.page_url,
    }


class PaginationPlanner:
    """Plans pagination for render slots and schedules synthetic pages."""

    def __init__(self, store: ContextStore, queue: RenderQueue, *, index_filename: str = "index.html") -> None:
        self.store = store
        self.queue = queue
        self.index_filename = index_filename

    async def plan(
        self,
        context: RenderContext,
        options: PaginationOptions,
        *,
        total_items: int,
        limit: int,
        offset: int = 0,
    ) -> PaginationState:
        """Return the pagination state of ``context``, computing it on first use.

        Args:
            context: Render slot invoking the aggregation
            options: Pagination options with site defaults applied
            total_items: Number of documents after filtering and self-exclusion
            limit: Documents per page, greater than zero
            offset: Documents skipped before page 1

        Returns:
            The state stored for ``context.key``; identical on every call

        """
        cached = self.store.get(context.key)
        if cached is not None and cached.processed:
            return cached

        matched_page = parse_current_page(context.document.pathname, options.segment)
        is_root = matched_page is None and not context.values.get(SEED_SYNTHETIC)
        current_page = matched_page or 1

        geometry = geometry_from_values(context.values) or derive_geometry(
            context.document.path, self.index_filename
        )
        total_pages = count_pages(total_items, limit)
        window = select_window(total_items, offset=offset, limit=limit, current_page=current_page)

        state = PaginationState(
            segment=options.segment,
            max_visible=options.max_visible,
            processed=True,
            current_page=current_page,
            total_pages=total_pages,
            base_url=geometry.base_url,
            url_prefix=geometry.url_prefix,
            target_dir=geometry.target_dir,
            offset_for_this_page=window.start,
        )
        self.store.set(context.key, state)
        logger.debug(
            "Planned %s: page %d of %d (%d items)", context.context_id, current_page, total_pages, total_items
        )

        if is_root and total_pages > 1:
            await self._schedule(context, geometry, state)

        return state

    async def _schedule(self, context: RenderContext, geometry: PageGeometry, state: PaginationState) -> None:
        if not context.build_id:
            logger.debug("No build id for %s, synthetic pages not scheduled", context.context_id)
            return

        seed = geometry.seed_values()
        scheduled = 0
        for page in range(2, state.total_pages + 1):
            pathname = geometry.synthetic_pathname(state.segment, page)
            if not self.store.claim_synthetic(context.build_id, pathname):
                continue
            await self.queue.enqueue(
                SyntheticRenderRequest(
                    content=context.document.content,
                    path=DocumentPath.from_pathname(pathname),
                    values=dict(seed),
                    build_id=context.build_id,
                )
            )
            scheduled += 1

        if scheduled:
            logger.info("Scheduled %d synthetic pages for %s", scheduled, geometry.root_pathname)
