"""Extraction of ``<meta name content>`` pairs from a document head.

Custom elements (tag names containing a hyphen) placed in the head are
rendered through the render bridge and the ``<meta>`` tags they produce are
merged as if they had been written inline.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import lxml.html
from lxml import etree

from sitepager.types import MetadataValue

if TYPE_CHECKING:
    from sitepager.ports import RenderBridge
    from sitepager.types import ContextKey, DocumentRecord

logger = logging.getLogger(__name__)

_HEAD_RE = re.compile(r"<head(?:\s[^>]*)?>(.*?)</head\s*>", re.IGNORECASE | re.DOTALL)
TOKEN_PREFIX = "meta_"


def _head_source(html: str) -> str | None:
    match = _HEAD_RE.search(html)
    if match is None:
        return None
    return match.group(1)


def _elements(source: str) -> list[Any]:
    """Parse an HTML fragment into its top-level elements, skipping text and comments."""
    if not source.strip():
        return []
    try:
        nodes = lxml.html.fragments_fromstring(source)
    except etree.ParserError:
        return []
    return [node for node in nodes if not isinstance(node, str) and isinstance(node.tag, str)]


def add_meta(metadata: dict[str, MetadataValue], name: str, content: str) -> None:
    """Record one meta value; a repeated name becomes a list in document order."""
    existing = metadata.get(name)
    if existing is None:
        metadata[name] = content
    elif isinstance(existing, list):
        existing.append(content)
    else:
        metadata[name] = [existing, content]


def _collect_meta(element: Any, metadata: dict[str, MetadataValue]) -> bool:
    if element.tag != "meta":
        return False
    name = element.get("name")
    content = element.get("content")
    if name and content:
        add_meta(metadata, name, content)
    return True


def parse_meta(html: str) -> dict[str, MetadataValue]:
    """Return the inline ``<meta>`` pairs found in the document head."""
    metadata: dict[str, MetadataValue] = {}
    head = _head_source(html)
    if head is None:
        return metadata
    for element in _elements(head):
        _collect_meta(element, metadata)
    return metadata


async def extract_metadata(
    html: str,
    *,
    bridge: RenderBridge | None = None,
    document: DocumentRecord | None = None,
    values: Mapping[str, Any] | None = None,
    context_key: ContextKey | None = None,
) -> dict[str, MetadataValue]:
    """Return the head metadata of ``html``, expanding custom head elements.

    Args:
        html: Raw document source
        bridge: Render bridge used for custom elements; without one they are ignored
        document: Document passed to the bridge for custom element renders
        values: Token values available to custom element templates
        context_key: Render slot of the page, parent of the custom element slots

    Returns:
        Mapping of meta name to content (list of contents for repeated names)

    """
    metadata: dict[str, MetadataValue] = {}
    head = _head_source(html)
    if head is None:
        return metadata

    for index, element in enumerate(_elements(head)):
        if _collect_meta(element, metadata):
            continue
        if "-" not in element.tag or bridge is None or document is None:
            continue
        if not bridge.has_template(element.tag):
            logger.debug("No template for head element <%s>, skipping", element.tag)
            continue

        slot = "".join(lxml.html.tostring(child, encoding="unicode") for child in element)
        component_values = {**(values or {}), **dict(element.attrib), "slot": (element.text or "") + slot}
        key = context_key.child(document.pathname, element.tag, index) if context_key else None
        result = await bridge.render(element.tag, values=component_values, document=document, context_key=key)
        if result is None:
            continue
        for fragment in result.children:
            for child in _elements(fragment):
                _collect_meta(child, metadata)

    return metadata


def metadata_tokens(metadata: Mapping[str, MetadataValue]) -> dict[str, MetadataValue]:
    """Expose metadata as template tokens: ``<meta name="og-title">`` becomes ``meta_og_title``."""
    tokens: dict[str, MetadataValue] = {}
    for name, value in metadata.items():
        key = TOKEN_PREFIX + re.sub(r"\W", "_", name)
        tokens[key] = list(value) if isinstance(value, list) else value
    return tokens
