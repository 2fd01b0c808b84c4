"""Tests for the core data types."""

import pytest
from pydantic import ValidationError

from sitepager.types import (
    AggregationRequest,
    ContextKey,
    DocumentPath,
    ItemTemplate,
    NamedTemplate,
    PaginationState,
    RenderContext,
    format_pathname,
)
from tests.helpers import make_context


@pytest.mark.parametrize(
    ("parts", "expected"),
    [
        (("blog", "page", "2.html"), "/blog/page/2.html"),
        (("/", "page", "2.html"), "/page/2.html"),
        (("/blog/", "index.html"), "/blog/index.html"),
        (("",), "/"),
    ],
)
def test_format_pathname(parts, expected):
    assert format_pathname(*parts) == expected


def test_document_path_from_pathname():
    path = DocumentPath.from_pathname("blog/post-1.html")

    assert path.pathname == "/blog/post-1.html"
    assert path.dirname == "/blog"
    assert path.filename == "post-1.html"
    assert path.stem == "post-1"


def test_root_document_path_has_root_dirname():
    path = DocumentPath.from_pathname("/index.html")

    assert path.dirname == "/"
    assert path.filename == "index.html"


def test_template_accepts_plain_id():
    request = AggregationRequest(paths=["blog"], template="post")

    assert request.template == NamedTemplate(id="post")
    assert request.template_id == "post"


def test_template_accepts_item_mapping():
    request = AggregationRequest(paths=["blog"], template={"item": "post"})

    assert request.template == ItemTemplate(item="post")
    assert request.template_id == "post"


@pytest.mark.parametrize("template", [None, "", {"other": "post"}])
def test_unresolvable_template_yields_no_id(template):
    request = AggregationRequest(paths=["blog"], template=template)

    assert request.template_id is None


def test_request_accepts_single_path_alias():
    request = AggregationRequest.model_validate({"path": "blog", "template": "post"})

    assert request.paths == ["blog"]


def test_request_coerces_numeric_strings():
    request = AggregationRequest.model_validate({"paths": ["blog"], "template": "post", "limit": "2", "offset": "1"})

    assert request.limit == 2
    assert request.offset == 1


def test_request_rejects_negative_limit():
    with pytest.raises(ValidationError):
        AggregationRequest(paths=["blog"], template="post", limit=-1)


def test_pagination_options_accept_camel_case():
    request = AggregationRequest.model_validate(
        {
            "paths": ["blog"],
            "template": "post",
            "pagination": {"segment": "p", "maxVisible": 3, "ariaLabel": "Blog Pagination"},
        }
    )

    assert request.pagination.segment == "p"
    assert request.pagination.max_visible == 3
    assert request.pagination.aria_label == "Blog Pagination"
    assert request.pagination.model_fields_set == {"segment", "max_visible", "aria_label"}


def test_pagination_true_enables_defaults():
    request = AggregationRequest(paths=["blog"], template="post", pagination=True)

    assert request.pagination is not None
    assert request.pagination.segment == "page"


def test_context_keys_are_structured_and_distinct():
    parent = ContextKey("/index.html", "page")
    first = parent.child("/index.html", "post", 0)
    second = parent.child("/index.html", "post", 1)

    assert first != second
    assert first == ContextKey("/index.html", "post", 0, parent=parent)
    assert str(first) == "/index.html#page#0//index.html#post#0"


def test_render_context_values_are_frozen():
    context = make_context("/index.html", values={"a": "1"})

    assert isinstance(context, RenderContext)
    with pytest.raises(TypeError):
        context.values["a"] = "2"


def test_pagination_state_page_urls():
    state = PaginationState(
        segment="page",
        max_visible=5,
        current_page=1,
        total_pages=3,
        base_url="/blog.html",
        url_prefix="/blog/",
        target_dir="/blog",
        offset_for_this_page=0,
    )

    assert state.page_url(1) == "/blog.html"
    assert state.page_url(3) == "/blog/page/3.html"
