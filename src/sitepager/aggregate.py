"""The aggregation operation.

``Aggregator.aggregate(options, context)`` collects documents, filters and
sorts them, renders the visible window through the item template and, when
pagination is configured together with a limit, renders the pagination
control and queues the remaining pages of the series.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import Any

from sitepager.collector import DocumentCollector
from sitepager.config import PaginationSettings
from sitepager.exceptions import ConfigurationError
from sitepager.metadata import metadata_tokens
from sitepager.planner import PaginationPlanner, pagination_tokens, series_root
from sitepager.ports import RenderBridge
from sitepager.selection import exclude_filename, filter_and_sort, select_window
from sitepager.types import (
    AggregationRequest,
    DocumentRecord,
    PaginationOptions,
    RenderContext,
    TokenTransform,
)

logger = logging.getLogger(__name__)


async def item_values(
    inherited: Mapping[str, Any],
    record: DocumentRecord,
    tokens: Mapping[str, TokenTransform] | None = None,
) -> dict[str, Any]:
    """Merge ancestor values, the item's metadata tokens and configured token transforms.

    A string transform renames a metadata key; a callable receives a copy of
    the full metadata mapping and may return an awaitable.
    """
    values: dict[str, Any] = {**inherited, **metadata_tokens(record.metadata), "item": record}
    for key, transform in (tokens or {}).items():
        if isinstance(transform, str):
            values[key] = record.metadata.get(transform)
            continue
        result = transform(dict(record.metadata))
        if inspect.isawaitable(result):
            result = await result
        values[key] = result
    return values


class Aggregator:
    """Runs aggregation calls for one build session."""

    def __init__(
        self,
        collector: DocumentCollector,
        bridge: RenderBridge,
        planner: PaginationPlanner,
        *,
        pagination_defaults: PaginationSettings | None = None,
    ) -> None:
        self.collector = collector
        self.bridge = bridge
        self.planner = planner
        self.pagination_defaults = pagination_defaults or PaginationSettings()

    def resolve_template(self, request: AggregationRequest) -> str:
        template_id = request.template_id
        if not template_id:
            raise ConfigurationError("Aggregate template was undefined")
        if not self.bridge.has_template(template_id):
            raise ConfigurationError(f"Aggregate template '{template_id}' could not be found")
        return template_id

    def resolve_pagination(self, request: AggregationRequest) -> PaginationOptions | None:
        """Apply site defaults to the pagination fields the caller left unset."""
        options = request.pagination
        if options is None or not request.limit:
            return None

        defaults = self.pagination_defaults
        update = {
            name: getattr(defaults, name)
            for name in PaginationOptions.model_fields
            if name not in options.model_fields_set and hasattr(defaults, name)
        }
        resolved = options.model_copy(update=update)
        if not self.bridge.has_template(resolved.template):
            raise ConfigurationError(f"Pagination template '{resolved.template}' could not be found")
        return resolved

    async def aggregate(
        self,
        options: AggregationRequest | Mapping[str, Any],
        context: RenderContext,
    ) -> list[str]:
        """Render the aggregated fragments for ``context``.

        Args:
            options: Aggregation request or its mapping form
            context: Render slot invoking the aggregation

        Returns:
            Rendered fragments: window items in order, then the pagination control

        Raises:
            ConfigurationError: The item or pagination template cannot be resolved
            PathNotFoundError: A requested path does not exist
            EmptyResultError: No documents were found

        """
        request = options if isinstance(options, AggregationRequest) else AggregationRequest.model_validate(options)

        template_id = self.resolve_template(request)
        pagination = self.resolve_pagination(request)

        records = await self.collector.collect(request.paths, recursive=request.recursive)
        selected = filter_and_sort(records, predicate=request.filter, comparator=request.sort)
        selected = exclude_filename(selected, series_root(context).filename)

        state = None
        if pagination is not None:
            state = await self.planner.plan(
                context,
                pagination,
                total_items=len(selected),
                limit=request.limit,
                offset=request.offset,
            )

        window = select_window(
            len(selected),
            offset=request.offset,
            limit=request.limit,
            current_page=state.current_page if state else 1,
        )
        logger.debug(
            "Aggregating %s: %d of %d documents [%d:%d]",
            context.context_id,
            len(window),
            len(selected),
            window.start,
            window.end,
        )

        fragments: list[str] = []
        document = context.document
        for index, record in enumerate(window.apply(selected), start=window.start):
            values = await item_values(context.values, record, request.tokens)
            result = await self.bridge.render(
                template_id,
                values=values,
                document=document,
                context_key=context.key.child(document.pathname, template_id, index),
                build_id=context.build_id,
            )
            if result is not None:
                fragments.extend(result.children)

        if state is not None and state.total_pages > 1:
            result = await self.bridge.render(
                pagination.template,
                values={**context.values, **pagination_tokens(state, pagination)},
                document=document,
                context_key=context.key.child(document.pathname, pagination.template),
                build_id=context.build_id,
            )
            if result is not None:
                fragments.extend(result.children)

        return fragments
