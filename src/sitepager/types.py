"""Core data types for sitepager."""

from __future__ import annotations

import posixpath
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, NamedTuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MetadataValue = str | list[str]
TokenTransform = str | Callable[[Mapping[str, MetadataValue]], Any | Awaitable[Any]]


def format_pathname(*parts: str) -> str:
    """Join site-relative path parts into a normalized pathname rooted at '/'."""
    joined = posixpath.join("/", *(part.strip("/") for part in parts if part and part.strip("/")))
    return posixpath.normpath(joined)


# --- Documents ---
class DocumentPath(BaseModel):
    """Site-relative location of a document: '/blog/post-1.html', '/blog', 'post-1.html'."""

    model_config = ConfigDict(frozen=True)

    pathname: str
    dirname: str
    filename: str

    @classmethod
    def from_pathname(cls, pathname: str) -> DocumentPath:
        normalized = format_pathname(pathname)
        return cls(
            pathname=normalized,
            dirname=posixpath.dirname(normalized),
            filename=posixpath.basename(normalized),
        )

    @property
    def stem(self) -> str:
        return posixpath.splitext(self.filename)[0]


class DocumentRecord(BaseModel):
    """A collected content unit. Never mutated after collection."""

    model_config = ConfigDict(frozen=True)

    content: str
    path: DocumentPath
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)

    @property
    def pathname(self) -> str:
        return self.path.pathname


class MetaItem(NamedTuple):
    """A single metadata value as seen by filter predicates."""

    name: str
    content: str


# --- Templates ---
class NamedTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["named"] = "named"
    id: str

    @property
    def template_id(self) -> str:
        return self.id


class ItemTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["item"] = "item"
    item: str

    @property
    def template_id(self) -> str:
        return self.item


TemplateRef = NamedTemplate | ItemTemplate


def to_template_ref(value: Any) -> TemplateRef | None:
    """Resolve a plain id or an ``{"item": id}`` mapping into a template variant."""
    if isinstance(value, NamedTemplate | ItemTemplate):
        return value
    if isinstance(value, str):
        return NamedTemplate(id=value)
    if isinstance(value, Mapping) and isinstance(value.get("item"), str):
        return ItemTemplate(item=value["item"])
    return None


# --- Aggregation options ---
class PaginationOptions(BaseModel):
    """Pagination configuration of one aggregation call.

    Fields left unset fall back to the configured site defaults.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    segment: str = "page"
    template: str = "pagination"
    max_visible: int = Field(default=5, ge=1)
    aria_label: str = "Pagination"
    ellipsis: str = "..."


class AggregationRequest(BaseModel):
    """Caller configuration for a single aggregation call."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True, frozen=True)

    paths: list[str] = Field(validation_alias=AliasChoices("paths", "path"))
    template: TemplateRef | None = None
    pagination: PaginationOptions | None = None
    filter: Callable[[MetaItem], bool] | None = None
    sort: Callable[[Mapping[str, MetadataValue], Mapping[str, MetadataValue]], int] | None = None
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)
    recursive: bool = False
    tokens: dict[str, TokenTransform] | None = None

    @field_validator("paths", mode="before")
    @classmethod
    def _coerce_paths(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("template", mode="before")
    @classmethod
    def _coerce_template(cls, value: Any) -> TemplateRef | None:
        return to_template_ref(value)

    @field_validator("pagination", mode="before")
    @classmethod
    def _coerce_pagination(cls, value: Any) -> Any:
        if value is True:
            return {}
        if value is False:
            return None
        return value

    @property
    def template_id(self) -> str | None:
        if self.template is None:
            return None
        return self.template.template_id or None


# --- Render contexts ---
@dataclass(frozen=True)
class ContextKey:
    """Structured identity of one render slot: document x template x index.

    ``parent`` is the slot that rendered this one, so items rendered by the
    same template inside different parents never share a key.
    """

    document_path: str
    template_id: str
    index: int = 0
    parent: ContextKey | None = None

    def child(self, document_path: str, template_id: str, index: int = 0) -> ContextKey:
        return ContextKey(document_path, template_id, index, parent=self)

    def __str__(self) -> str:
        own = f"{self.document_path}#{self.template_id}#{self.index}"
        if self.parent is None:
            return own
        return f"{self.parent}/{own}"


@dataclass(frozen=True)
class RenderContext:
    """Per-invocation state supplied by the host for one aggregation call.

    Attributes:
        key: Render slot identity, also the Context Store key
        document: Document currently being rendered
        build_id: Identifier of the build pass, None outside a build
        values: Token values inherited from ancestor renders (frozen)

    """

    key: ContextKey
    document: DocumentRecord
    build_id: str | None = None
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def context_id(self) -> str:
        return str(self.key)


# --- Pagination ---
class PaginationState(BaseModel):
    """Derived pagination facts for one render slot. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    segment: str
    max_visible: int
    processed: bool = True
    current_page: int
    total_pages: int
    base_url: str
    url_prefix: str
    target_dir: str
    offset_for_this_page: int

    def page_url(self, page: int) -> str:
        if page <= 1:
            return self.base_url
        return f"{self.url_prefix}{self.segment}/{page}.html"


class SyntheticRenderRequest(BaseModel):
    """A virtual page queued for a later full render pass."""

    model_config = ConfigDict(frozen=True)

    content: str
    path: DocumentPath
    values: dict[str, Any] = Field(default_factory=dict)
    build_id: str | None = None


# --- Rendering ---
class RenderResult(BaseModel):
    children: list[str] = Field(default_factory=list)


class BuildResult(BaseModel):
    path: DocumentPath
    html: str
    synthetic: bool = False
