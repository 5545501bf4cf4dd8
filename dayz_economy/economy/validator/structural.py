"""Structural XML parsing with lxml, and a dict rendering of the parsed tree."""

from __future__ import annotations

from typing import Any

from lxml import etree

from economy.validator.scanner import BOM

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"


class StructuralParseError(Exception):
    """The XML parser rejected the document."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def parse_xml(text: str) -> etree._Element:
    """Parse *text* into an element tree or raise StructuralParseError."""
    if text.startswith(BOM):
        text = text[1:]
    try:
        return etree.fromstring(text.encode("utf-8"), parser=_make_parser())
    except etree.XMLSyntaxError as e:
        raise StructuralParseError(e.msg or str(e), e.lineno) from e


def _node_value(element: etree._Element) -> Any:
    node: dict[str, Any] = {
        f"{ATTRIBUTE_PREFIX}{key}": value for key, value in element.attrib.items()
    }
    for child in element:
        if not isinstance(child.tag, str):
            continue
        value = _node_value(child)
        if child.tag not in node:
            node[child.tag] = value
        elif isinstance(node[child.tag], list):
            node[child.tag].append(value)
        else:
            node[child.tag] = [node[child.tag], value]

    text = (element.text or "").strip()
    if not node:
        return text
    if text:
        node[TEXT_KEY] = text
    return node


def element_to_dict(element: etree._Element) -> dict[str, Any]:
    """Render an element as nested dicts.

    Attributes become ``@_name`` keys, element text becomes ``#text`` (or the
    whole value for a text-only element), and repeated child tags become lists.
    """
    return {element.tag: _node_value(element)}
