"""Documentation markup -> document model fragments.

Rendering Rules:
- summary, remarks, example, returns, value: containers, rendered in place
- para: Paragraph when it has nested markup, otherwise a line break
- code: CodeBlock; c: InlineCode
- paramref, typeparamref: InlineCode of the referenced name
- see, seealso: cross-reference resolved through the hierarchy's symbol table
    * indexed owner   -> Link (display name, output path)
    * known, unindexed -> InlineCode of the display name
    * unknown id      -> InlineCode of the raw id
- list: BulletList, or Table for ``type="table"``
- inheritdoc and the configured defer tag: nothing (resolution happens
  before rendering)
- anything else: verbatim markup as Text plus a warning

TEXT_ONLY mode drops decoration so the output fits in a table cell.
"""

from __future__ import annotations

import textwrap
import xml.etree.ElementTree as ET
from copy import copy
from enum import Enum
from typing import TYPE_CHECKING

from docmark.config.models import RenderConfig
from docmark.core.logging import get_logger
from docmark.core.text import collapse_spaces, summarize
from docmark.index.nodes import DEFER_TAG, DocumentationNode
from docmark.metadata.models import MemberSymbol, TypeSymbol
from docmark.render.model import (
    Badge,
    Bold,
    BulletList,
    CodeBlock,
    Fragment,
    Inline,
    InlineCode,
    LineBreak,
    Link,
    LinkTable,
    Paragraph,
    Table,
    Text,
    inline_run,
    normalize,
    plain_text,
)
from docmark.render.names import qualified_name, symbol_name
from docmark.render.paths import PathResolver, symbol_path

if TYPE_CHECKING:
    from docmark.index.store import DocumentationRegistry
    from docmark.metadata.hierarchy import HierarchyGraph

log = get_logger(__name__)

CONTAINER_TAGS = frozenset({"summary", "remarks", "example", "returns", "value", "description", "term"})

UNKNOWN_ID_PREFIX = "!:"

INLINE_TYPES = (Text, InlineCode, Link, Bold, Badge, LineBreak)


class RenderMode(str, Enum):
    NORMAL = "normal"
    TEXT_ONLY = "text_only"


class MarkupRenderer:
    """Renders one documentation node at a time into a fragment.

    ``current_type`` is the type whose document is being built; references
    to its own members are shown without the type prefix.

    Usage::

        renderer = MarkupRenderer(registry=registry, graph=graph, links=document.links)
        fragment = renderer.render(section(node, "summary"))
        cell = renderer.render_text(section(node, "summary"), max_length=100)
    """

    def __init__(
        self,
        *,
        registry: DocumentationRegistry,
        graph: HierarchyGraph,
        links: LinkTable | None = None,
        paths: PathResolver = symbol_path,
        current_type: TypeSymbol | None = None,
        config: RenderConfig | None = None,
        defer_tag: str = DEFER_TAG,
    ) -> None:
        self._registry = registry
        self._graph = graph
        self.links = links if links is not None else LinkTable()
        self._paths = paths
        self.current_type = current_type
        self._config = config or RenderConfig()
        self._defer_tag = defer_tag

    def render(self, node: DocumentationNode | None, mode: RenderMode = RenderMode.NORMAL) -> Fragment:
        """Render a node's content (not the node's own tag) into a fragment."""
        if node is None:
            return []
        return normalize(self._children(node, mode))

    def render_text(self, node: DocumentationNode | None, max_length: int | None = None) -> str:
        """Single-line plain text, truncated with an ellipsis past ``max_length``."""
        text = plain_text(self.render(node, RenderMode.TEXT_ONLY))
        if max_length is None:
            return text
        return summarize(text, max_length)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _children(self, node: ET.Element, mode: RenderMode) -> Fragment:
        out: Fragment = []
        if node.text:
            out.append(Text(collapse_spaces(node.text)))
        for child in node:
            out.extend(self._element(child, mode))
            if child.tail:
                out.append(Text(collapse_spaces(child.tail)))
        return out

    def _element(self, element: ET.Element, mode: RenderMode) -> Fragment:
        tag = element.tag if isinstance(element.tag, str) else ""
        if tag in CONTAINER_TAGS:
            return self._children(element, mode)
        if tag == "para":
            return self._para(element, mode)
        if tag == "code":
            return self._code(element, mode)
        if tag == "c":
            return self._inline_code(element, mode)
        if tag in ("paramref", "typeparamref"):
            return [self._code_or_text(element.get("name", ""), mode)]
        if tag in ("see", "seealso"):
            return [self._see(element, mode)]
        if tag == "list":
            return self._list(element, mode)
        if tag == "br":
            return [LineBreak()] if mode is RenderMode.NORMAL else [Text(" ")]
        if tag in (DEFER_TAG, self._defer_tag):
            return []
        return self._unknown(element)

    # =========================================================================
    # Tag handlers
    # =========================================================================

    def _code_or_text(self, text: str, mode: RenderMode) -> Inline:
        return Text(text) if mode is RenderMode.TEXT_ONLY else InlineCode(text)

    def _para(self, element: ET.Element, mode: RenderMode) -> Fragment:
        if mode is RenderMode.TEXT_ONLY:
            return [Text(" "), *self._children(element, mode), Text(" ")]
        if len(element):
            return [Paragraph(normalize(self._children(element, mode)))]
        text = collapse_spaces(element.text or "").strip()
        # Text-only para still breaks the line, but keeps its words
        return [LineBreak(), Text(text)] if text else [LineBreak()]

    def _code(self, element: ET.Element, mode: RenderMode) -> Fragment:
        raw = "".join(element.itertext())
        if mode is RenderMode.TEXT_ONLY:
            return [Text(collapse_spaces(raw))]
        return [CodeBlock(textwrap.dedent(raw).strip("\n").rstrip(), self._config.code_language)]

    def _inline_code(self, element: ET.Element, mode: RenderMode) -> Fragment:
        text = collapse_spaces("".join(element.itertext())).strip()
        return [self._code_or_text(text, mode)]

    def _see(self, element: ET.Element, mode: RenderMode) -> Inline:
        langword = element.get("langword")
        if langword:
            return self._code_or_text(langword, mode)

        inner = collapse_spaces("".join(element.itertext())).strip()
        href = element.get("href")
        if href:
            text = inner or href
            return Text(text) if mode is RenderMode.TEXT_ONLY else self.links.link(text, href)

        key = element.get("cref", "")
        symbol = None if key.startswith(UNKNOWN_ID_PREFIX) else self._graph.find_symbol(key)
        if symbol is None:
            log.debug("cref_unknown", key=key)
            return self._code_or_text(inner or key.removeprefix(UNKNOWN_ID_PREFIX), mode)

        if isinstance(symbol, TypeSymbol):
            name = symbol_name(symbol)
            owner = symbol
        elif isinstance(symbol, MemberSymbol):
            name = qualified_name(symbol, self.current_type)
            owner = symbol.declaring
        else:
            name = symbol_name(symbol)
            owner = None
        name = inner or name

        if mode is RenderMode.TEXT_ONLY:
            return Text(name)
        if owner is not None and self._registry.is_indexed(owner):
            return self.links.link(name, self._paths(symbol))
        return InlineCode(name)

    def _list(self, element: ET.Element, mode: RenderMode) -> Fragment:
        if mode is RenderMode.TEXT_ONLY:
            out: Fragment = []
            for item in element.iter("item"):
                out.append(Text(" "))
                out.extend(self._children(item, mode))
            return out

        if element.get("type") == "table":
            header = element.find("listheader")
            headers = ["Term", "Description"]
            if header is not None:
                headers = [
                    plain_text(self.render(header.find("term"), RenderMode.TEXT_ONLY)) or headers[0],
                    plain_text(self.render(header.find("description"), RenderMode.TEXT_ONLY)) or headers[1],
                ]
            rows = [
                [self._cell(item.find("term")), self._cell(item.find("description"))]
                for item in element.findall("item")
            ]
            return [Table(headers, rows)]

        items = [self.render(item) for item in element.findall("item")]
        return [BulletList([item for item in items if item])]

    def _cell(self, node: ET.Element | None) -> list[Inline]:
        return inline_run(self.render(node))

    def _unknown(self, element: ET.Element) -> Fragment:
        log.warning("unrecognized_markup_tag", tag=str(element.tag))
        detached = copy(element)
        detached.tail = None
        return [Text(collapse_spaces(ET.tostring(detached, encoding="unicode")))]

