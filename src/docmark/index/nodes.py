"""Helpers over documentation nodes.

A documentation node is the ``<member name="...">`` element of a
documentation source. Its children are the sections (``summary``,
``remarks``, ``example``, ``param``, ``typeparam``, ``returns``, ``value``)
and, when the author deferred to an ancestor, an ``<inheritdoc/>`` marker.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

DocumentationNode = ET.Element

DEFER_TAG = "inheritdoc"


def section(node: DocumentationNode | None, tag: str) -> DocumentationNode | None:
    """First direct child section with the given tag."""
    if node is None:
        return None
    return node.find(tag)


def _named(node: DocumentationNode | None, tag: str, name: str) -> DocumentationNode | None:
    if node is None:
        return None
    # First match wins on duplicates
    return next((e for e in node.iter(tag) if e.get("name") == name), None)


def param_node(node: DocumentationNode | None, name: str) -> DocumentationNode | None:
    return _named(node, "param", name)


def is_deferred(node: DocumentationNode | None, defer_tag: str = DEFER_TAG) -> bool:
    """True when the node's content must come from an ancestor."""
    return node is not None and node.find(defer_tag) is not None

