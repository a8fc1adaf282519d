"""Render module exports."""

from docmark.render.builder import DocumentBuilder
from docmark.render.engine import MarkupRenderer, RenderMode
from docmark.render.model import (
    Badge,
    Bold,
    BulletList,
    CodeBlock,
    Divider,
    Document,
    Heading,
    InlineCode,
    LineBreak,
    Link,
    LinkTable,
    Paragraph,
    Quote,
    Table,
    Text,
    inline_run,
    plain_text,
)
from docmark.render.names import display_name, member_name, method_signature, syntax
from docmark.render.paths import PathResolver, symbol_path

__all__ = [
    # Engine
    "MarkupRenderer",
    "RenderMode",
    # Builder
    "DocumentBuilder",
    # Model
    "Badge",
    "Bold",
    "BulletList",
    "CodeBlock",
    "Divider",
    "Document",
    "Heading",
    "InlineCode",
    "LineBreak",
    "Link",
    "LinkTable",
    "Paragraph",
    "Quote",
    "Table",
    "Text",
    "inline_run",
    "plain_text",
    # Names and paths
    "PathResolver",
    "display_name",
    "member_name",
    "method_signature",
    "symbol_path",
    "syntax",
]
