"""Jinja2 render bridge.

Template ids map to ``<id>.html`` in the site's templates directory, falling
back to the templates bundled with the package (the default pagination
control lives there). Every render exposes an ``aggregate(...)`` global bound
to the slot being rendered, so templates can call back into aggregation.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from importlib.resources import files
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, Template, TemplateNotFound, select_autoescape
from markupsafe import Markup

from sitepager.exceptions import ConfigurationError
from sitepager.types import AggregationRequest, ContextKey, DocumentRecord, RenderContext, RenderResult

if TYPE_CHECKING:
    from sitepager.aggregate import Aggregator

logger = logging.getLogger(__name__)

PAGE_TEMPLATE_ID = "page"


class TemplateLoader:
    """Loads component templates for the render bridge.

    Supports:
    - A site templates directory overriding bundled templates
    - Page sources rendered as templates
    - Async rendering, so templates may await aggregation
    """

    def __init__(self, template_dir: Path | None = None, suffix: str = ".html") -> None:
        """Initialize TemplateLoader.

        Args:
            template_dir: Site templates directory. Bundled templates are always searched last.
            suffix: File suffix appended to a template id

        """
        bundled_dir = Path(str(files("sitepager").joinpath("templates")))
        search_path = [bundled_dir] if template_dir is None else [Path(template_dir), bundled_dir]

        self.template_dir = template_dir
        self.suffix = suffix
        self.env = Environment(
            loader=ChoiceLoader([FileSystemLoader(str(path)) for path in search_path]),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=True),
            enable_async=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def template_name(self, template_id: str) -> str:
        return f"{template_id}{self.suffix}"

    def has_template(self, template_id: str) -> bool:
        try:
            self.load_template(template_id)
        except TemplateNotFound:
            return False
        return True

    def load_template(self, template_id: str) -> Template:
        """Load a template by id.

        Raises:
            TemplateNotFound: If template does not exist

        """
        return self.env.get_template(self.template_name(template_id))

    def from_source(self, source: str) -> Template:
        return self.env.from_string(source)


class JinjaRenderBridge:
    """Renders templates with token values and wires in re-entrant aggregation."""

    def __init__(self, loader: TemplateLoader, aggregator: Aggregator | None = None) -> None:
        self.loader = loader
        self.aggregator = aggregator

    def bind(self, aggregator: Aggregator) -> None:
        self.aggregator = aggregator

    def has_template(self, template_id: str) -> bool:
        return self.loader.has_template(template_id)

    async def render(
        self,
        template_id: str,
        *,
        values: Mapping[str, Any],
        document: DocumentRecord,
        context_key: ContextKey | None = None,
        build_id: str | None = None,
    ) -> RenderResult | None:
        """Render a component template. Returns None when the template is unknown."""
        try:
            template = self.loader.load_template(template_id)
        except TemplateNotFound:
            logger.warning("Template '%s' not found while rendering %s", template_id, document.pathname)
            return None

        key = context_key or ContextKey(document.pathname, template_id)
        html = await self._render(template, template_id, values, document, key, build_id)
        return RenderResult(children=[html])

    async def render_page(
        self,
        document: DocumentRecord,
        *,
        values: Mapping[str, Any],
        build_id: str | None = None,
    ) -> str:
        """Render a page whose source is itself a template."""
        key = ContextKey(document.pathname, PAGE_TEMPLATE_ID)
        template = self.loader.from_source(document.content)
        return await self._render(template, PAGE_TEMPLATE_ID, values, document, key, build_id)

    async def _render(
        self,
        template: Template,
        template_id: str,
        values: Mapping[str, Any],
        document: DocumentRecord,
        key: ContextKey,
        build_id: str | None,
    ) -> str:
        context = {
            **values,
            "document": document,
            "aggregate": self._aggregate_hook(template_id, values, document, key, build_id),
        }
        return await template.render_async(context)

    def _aggregate_hook(
        self,
        template_id: str,
        values: Mapping[str, Any],
        document: DocumentRecord,
        key: ContextKey,
        build_id: str | None,
    ):
        counter = itertools.count()

        async def aggregate(*paths: str, **options: Any) -> Markup:
            if self.aggregator is None:
                raise ConfigurationError("No aggregator is bound to the render bridge")
            if paths:
                options["paths"] = list(paths)
            request = AggregationRequest.model_validate(options)
            context = RenderContext(
                key=key.child(document.pathname, template_id, next(counter)),
                document=document,
                build_id=build_id,
                values=values,
            )
            fragments = await self.aggregator.aggregate(request, context)
            return Markup("".join(fragments))

        return aggregate
