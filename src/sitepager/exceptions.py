"""Centralized exceptions for sitepager."""

from __future__ import annotations

from collections.abc import Sequence


class SitepagerError(Exception):
    """Base exception for all sitepager errors."""


class AggregationError(SitepagerError):
    """Base class for errors that abort a single aggregation call."""


class ConfigurationError(AggregationError):
    """Raised when the aggregation options cannot be resolved (e.g. missing template id)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PathNotFoundError(AggregationError):
    """Raised when a requested aggregation path does not exist under the content root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Aggregate path does not exist: "{path}"')


class EmptyResultError(AggregationError):
    """Raised when collection across all requested paths yields no documents."""

    def __init__(self, paths: Sequence[str]) -> None:
        self.paths = list(paths)
        joined = ", ".join(f'"{path}"' for path in self.paths)
        super().__init__(f"Aggregation found no documents in {joined}")


class DocumentNotFoundError(SitepagerError):
    """Raised when a document cannot be found in the content repository."""

    def __init__(self, pathname: str) -> None:
        self.pathname = pathname
        super().__init__(f"Document with pathname '{pathname}' not found.")


class ConfigLoadError(SitepagerError):
    """Raised when a site configuration file cannot be loaded or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load or parse config at '{path}': {reason}")
