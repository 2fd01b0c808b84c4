"""Tests for head metadata extraction."""

import pytest

from sitepager.metadata import add_meta, extract_metadata, metadata_tokens, parse_meta
from sitepager.types import DocumentPath, DocumentRecord, RenderResult


def test_parse_meta_reads_named_meta_tags():
    html = (
        "<!DOCTYPE html><html><head><title>Hi</title>"
        '<meta charset="utf-8"><meta name="title" content="Hello">'
        '<meta name="description" content="World"></head><body></body></html>'
    )

    assert parse_meta(html) == {"title": "Hello", "description": "World"}


def test_parse_meta_collects_repeated_names_in_order():
    html = '<html><head><meta name="tag" content="a"><meta name="tag" content="b"></head></html>'

    assert parse_meta(html) == {"tag": ["a", "b"]}


def test_parse_meta_ignores_body_and_incomplete_tags():
    html = (
        '<html><head><meta name="empty" content=""><meta content="orphan"></head>'
        '<body><meta name="late" content="x"></body></html>'
    )

    assert parse_meta(html) == {}


def test_parse_meta_without_head():
    assert parse_meta("<p>No head here</p>") == {}


def test_add_meta_promotes_to_list():
    metadata = {}
    add_meta(metadata, "k", "1")
    add_meta(metadata, "k", "2")
    add_meta(metadata, "k", "3")

    assert metadata == {"k": ["1", "2", "3"]}


def test_metadata_tokens_prefix_and_sanitize():
    tokens = metadata_tokens({"title": "T", "og-image": "i.png", "tags": ["a"]})

    assert tokens == {"meta_title": "T", "meta_og_image": "i.png", "meta_tags": ["a"]}


class HeadBridge:
    def __init__(self):
        self.rendered = []

    def has_template(self, template_id):
        return template_id == "site-meta"

    async def render(self, template_id, *, values, document, context_key=None, build_id=None):
        self.rendered.append((template_id, dict(values), context_key))
        return RenderResult(
            children=[f'<meta name="name" content="{values["site"]}"><meta name="slot" content="{values["slot"]}">']
        )


@pytest.mark.asyncio
async def test_extract_metadata_expands_custom_head_elements():
    html = (
        '<html><head><meta name="title" content="Home">'
        '<site-meta site="sitepager">hello</site-meta><unknown-thing></unknown-thing></head></html>'
    )
    document = DocumentRecord(content=html, path=DocumentPath.from_pathname("/index.html"))
    bridge = HeadBridge()

    metadata = await extract_metadata(html, bridge=bridge, document=document, values={"lang": "en"})

    assert metadata == {"title": "Home", "name": "sitepager", "slot": "hello"}
    assert [call[0] for call in bridge.rendered] == ["site-meta"]
    assert bridge.rendered[0][1]["lang"] == "en"


@pytest.mark.asyncio
async def test_extract_metadata_without_bridge_skips_custom_elements():
    html = '<html><head><meta name="title" content="Home"><site-meta site="x"></site-meta></head></html>'

    assert await extract_metadata(html) == {"title": "Home"}
