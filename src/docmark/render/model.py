"""Style-agnostic document model handed to output encoders.

Inline nodes: Text, InlineCode, Link, Bold, Badge, LineBreak.
Block nodes: Heading, Paragraph, CodeBlock, Table, BulletList, Quote, Divider.

A rendered markup fragment mixes both (a ``<para>`` inside a summary becomes
a Paragraph between inline runs); encoders decide how to lay that out.
Links carry the index assigned by the document's LinkTable, so a target
referenced many times is emitted once.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from docmark.core.text import collapse_spaces

# ============================================================================
# INLINE NODES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Text:
    text: str


@dataclass(frozen=True, slots=True)
class InlineCode:
    text: str


@dataclass(frozen=True, slots=True)
class Link:
    text: str
    target: str
    index: int


@dataclass(frozen=True, slots=True)
class Bold:
    text: str


@dataclass(frozen=True, slots=True)
class Badge:
    text: str


@dataclass(frozen=True, slots=True)
class LineBreak:
    pass


Inline = Text | InlineCode | Link | Bold | Badge | LineBreak

# ============================================================================
# BLOCK NODES
# ============================================================================


@dataclass(slots=True)
class Heading:
    level: int
    content: list[Inline]


@dataclass(slots=True)
class Paragraph:
    content: list[Node]


@dataclass(slots=True)
class CodeBlock:
    text: str
    language: str = ""


@dataclass(slots=True)
class Table:
    headers: list[str]
    rows: list[list[list[Inline]]] = field(default_factory=list)


@dataclass(slots=True)
class BulletList:
    items: list[list[Node]] = field(default_factory=list)


@dataclass(slots=True)
class Quote:
    content: list[Inline]


@dataclass(frozen=True, slots=True)
class Divider:
    pass


Block = Heading | Paragraph | CodeBlock | Table | BulletList | Quote | Divider
Node = Inline | Block
Fragment = list[Node]


class LinkTable:
    """Per-document link target deduplication.

    Owned by the renderer for one document's lifetime and reset at the start
    of each document.
    """

    def __init__(self) -> None:
        self._targets: dict[str, int] = {}

    def index_of(self, target: str) -> int:
        index = self._targets.get(target)
        if index is None:
            index = len(self._targets)
            self._targets[target] = index
        return index

    def link(self, text: str, target: str) -> Link:
        return Link(text=text, target=target, index=self.index_of(target))

    def reset(self) -> None:
        self._targets.clear()

    def items(self) -> list[tuple[str, int]]:
        return list(self._targets.items())

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, target: object) -> bool:
        return target in self._targets


@dataclass(slots=True)
class Document:
    """One output document: ordered blocks plus its link table."""

    title: str
    blocks: list[Block] = field(default_factory=list)
    links: LinkTable = field(default_factory=LinkTable)

    def extend(self, blocks: Iterable[Block | None]) -> None:
        self.blocks.extend(b for b in blocks if b is not None)


def _texts(nodes: Iterable[Node]) -> Iterator[str]:
    for node in nodes:
        if isinstance(node, (Text, InlineCode, Link, Bold, Badge)):
            yield node.text
        elif isinstance(node, LineBreak):
            yield " "
        elif isinstance(node, (Heading, Paragraph, Quote)):
            yield " "
            yield from _texts(node.content)
            yield " "
        elif isinstance(node, CodeBlock):
            yield f" {node.text} "
        elif isinstance(node, BulletList):
            for item in node.items:
                yield " "
                yield from _texts(item)
        elif isinstance(node, Table):
            for row in node.rows:
                for cell in row:
                    yield " "
                    yield from _texts(cell)


def plain_text(nodes: Iterable[Node]) -> str:
    """Flatten a fragment to a single whitespace-normalized line."""
    return collapse_spaces("".join(_texts(nodes))).strip()


def inline_run(nodes: Iterable[Node]) -> list[Inline]:
    """Flatten a fragment to inline nodes, for table cells.

    Paragraphs, headings and quotes splice their content in on a line of
    their own, code blocks become inline code, list items and table rows
    each start a new line. Line breaks never lead, trail or repeat.
    """
    out: list[Inline] = []
    for node in nodes:
        if isinstance(node, (Text, InlineCode, Link, Bold, Badge, LineBreak)):
            out.append(node)
        elif isinstance(node, CodeBlock):
            out.append(InlineCode(collapse_spaces(node.text).strip()))
        elif isinstance(node, (Heading, Paragraph, Quote)):
            out.extend([LineBreak(), *inline_run(node.content), LineBreak()])
        elif isinstance(node, BulletList):
            for item in node.items:
                out.extend([LineBreak(), *inline_run(item)])
            out.append(LineBreak())
        elif isinstance(node, Table):
            for row in node.rows:
                out.append(LineBreak())
                for position, cell in enumerate(row):
                    if position:
                        out.append(Text(" "))
                    out.extend(cell)
            out.append(LineBreak())
        elif isinstance(node, Divider):
            out.append(LineBreak())

    run: list[Inline] = []
    for node in out:
        if isinstance(node, LineBreak) and (not run or isinstance(run[-1], LineBreak)):
            continue
        run.append(node)
    while run and isinstance(run[-1], LineBreak):
        run.pop()
    return normalize(run)  # type: ignore[return-value]


def normalize(fragment: Fragment) -> Fragment:
    """Merge adjacent text runs, drop empty ones, trim the fragment's edges."""
    merged: Fragment = []
    for node in fragment:
        if isinstance(node, Text):
            if not node.text:
                continue
            if merged and isinstance(merged[-1], Text):
                merged[-1] = Text(collapse_spaces(merged[-1].text + node.text))
                continue
        merged.append(node)

    if merged and isinstance(merged[0], Text):
        merged[0] = Text(merged[0].text.lstrip())
    if merged and isinstance(merged[-1], Text):
        merged[-1] = Text(merged[-1].text.rstrip())
    return [n for n in merged if not (isinstance(n, Text) and not n.text)]
