"""Thin helpers around :mod:`lxml.html` used as the template document tree."""

from __future__ import annotations

import re
from typing import Iterator, Optional

from lxml import etree
from lxml import html as lxml_html

HtmlElement = lxml_html.HtmlElement

_INTER_TAG_WHITESPACE = re.compile(r">\s+<")


def compact_whitespace(text: str) -> str:
    """Collapse whitespace that sits directly between two tags."""
    return _INTER_TAG_WHITESPACE.sub("><", text)


def parse_document(text: str) -> HtmlElement:
    """Parse a full HTML document and return its root ``<html>`` element."""
    try:
        return lxml_html.document_fromstring(text)
    except (etree.ParserError, etree.XMLSyntaxError) as exc:
        raise ValueError(f"unable to parse template markup: {exc}") from exc


def serialize_document(root: HtmlElement) -> str:
    """Serialise the document, doctype first, without adding any whitespace."""
    doctype = root.getroottree().docinfo.doctype or ""
    return doctype + lxml_html.tostring(root, encoding="unicode", method="html")


def script_elements(root: HtmlElement) -> Iterator[HtmlElement]:
    """Yield every ``<script>`` element in document order."""
    return root.iter("script")


def previous_element(node: HtmlElement) -> Optional[HtmlElement]:
    """Return the closest preceding sibling element.

    Text is held in ``tail`` by lxml so it is skipped implicitly; comments and
    processing instructions are skipped explicitly.
    """
    sibling = node.getprevious()
    while sibling is not None and not isinstance(sibling.tag, str):
        sibling = sibling.getprevious()
    return sibling


def is_script(node: Optional[HtmlElement]) -> bool:
    return node is not None and isinstance(node.tag, str) and node.tag.lower() == "script"


def is_attached(node: HtmlElement) -> bool:
    return node.getparent() is not None


def drop_node(node: HtmlElement) -> None:
    """Detach ``node`` from its parent, keeping the text that followed it."""
    if is_attached(node):
        node.drop_tree()


def first_text(node: HtmlElement) -> str:
    """Text of the first child text node, empty when there is none."""
    return node.text or ""
