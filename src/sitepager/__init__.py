"""Content aggregation and pagination for static site builds."""

from sitepager.aggregate import Aggregator
from sitepager.builder import SiteBuilder
from sitepager.config import SitepagerConfig
from sitepager.exceptions import (
    AggregationError,
    ConfigurationError,
    EmptyResultError,
    PathNotFoundError,
    SitepagerError,
)
from sitepager.types import (
    AggregationRequest,
    ContextKey,
    DocumentRecord,
    PaginationOptions,
    PaginationState,
    RenderContext,
    SyntheticRenderRequest,
)

__all__ = [
    "AggregationError",
    "AggregationRequest",
    "Aggregator",
    "ConfigurationError",
    "ContextKey",
    "DocumentRecord",
    "EmptyResultError",
    "PaginationOptions",
    "PaginationState",
    "PathNotFoundError",
    "RenderContext",
    "SiteBuilder",
    "SitepagerConfig",
    "SitepagerError",
    "SyntheticRenderRequest",
]
