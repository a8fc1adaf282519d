"""Document builders: unit table of contents, type pages, member pages.

Each document gets a fresh LinkTable. Summaries come from the inheritance
resolver, so an override marked ``<inheritdoc/>`` shows its base's text.

Visibility:
- types: public, or protected when nested
- members: public or protected, not compiler special names, not in
  ``RenderConfig.ignored_method_names``
- properties follow their getter; write-only properties are not listed
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import groupby
from typing import TYPE_CHECKING

from docmark.config.models import RenderConfig
from docmark.core.errors import ContractViolation, InternalError
from docmark.core.logging import get_logger
from docmark.core.text import summarize, to_header_string
from docmark.index.nodes import DEFER_TAG, DocumentationNode, param_node, section
from docmark.metadata.models import (
    OBJECT,
    CallableSymbol,
    ConstructorSymbol,
    EventSymbol,
    FieldSymbol,
    MemberSymbol,
    MetadataUnit,
    MethodSymbol,
    PropertySymbol,
    Symbol,
    TypeCategory,
    TypeRef,
    TypeSymbol,
)
from docmark.render.engine import INLINE_TYPES, MarkupRenderer
from docmark.render.model import (
    Badge,
    Block,
    Bold,
    BulletList,
    CodeBlock,
    Divider,
    Document,
    Fragment,
    Heading,
    Inline,
    InlineCode,
    LineBreak,
    Paragraph,
    Quote,
    Table,
    Text,
)
from docmark.render.names import display_name, member_name, method_signature, syntax
from docmark.render.paths import PathResolver, symbol_path, unit_path

if TYPE_CHECKING:
    from docmark.index.resolver import InheritanceResolver
    from docmark.index.store import DocumentationRegistry
    from docmark.metadata.hierarchy import HierarchyGraph

log = get_logger(__name__)


def blocks_of(fragment: Fragment) -> list[Block]:
    """Wrap runs of inline nodes into paragraphs; blocks pass through."""
    blocks: list[Block] = []
    run: list[Inline] = []
    for node in fragment:
        if isinstance(node, INLINE_TYPES):
            run.append(node)
            continue
        if run:
            blocks.append(Paragraph(list(run)))
            run = []
        blocks.append(node)  # type: ignore[arg-type]
    if run:
        blocks.append(Paragraph(run))
    return blocks


def _is_static(member: MemberSymbol) -> bool:
    if isinstance(member, (PropertySymbol, EventSymbol)) and member.accessors:
        return any(a.is_static for a in member.accessors)
    return member.is_static


class DocumentBuilder:
    """Builds the style-agnostic documents for one or more metadata units.

    Usage::

        builder = DocumentBuilder(registry, graph, resolver)
        for path, document in builder.build_all(unit):
            encoder.write(path, document)
    """

    def __init__(
        self,
        registry: DocumentationRegistry,
        graph: HierarchyGraph,
        resolver: InheritanceResolver,
        *,
        config: RenderConfig | None = None,
        paths: PathResolver = symbol_path,
        units: Iterable[MetadataUnit] = (),
        defer_tag: str = DEFER_TAG,
    ) -> None:
        self._registry = registry
        self._graph = graph
        self._resolver = resolver
        self._config = config or RenderConfig()
        self._paths = paths
        self._defer_tag = defer_tag
        self._frameworks: dict[str, str | None] = {u.name: u.framework for u in units}

    def renderer(self, document: Document, current_type: TypeSymbol | None = None) -> MarkupRenderer:
        return MarkupRenderer(
            registry=self._registry,
            graph=self._graph,
            links=document.links,
            paths=self._paths,
            current_type=current_type,
            config=self._config,
            defer_tag=self._defer_tag,
        )

    # =========================================================================
    # Visibility
    # =========================================================================

    def is_visible_type(self, type_symbol: TypeSymbol) -> bool:
        if "public" in type_symbol.modifiers:
            return True
        return type_symbol.is_nested and "protected" in type_symbol.modifiers

    def _is_visible_callable(self, method: CallableSymbol, accessor: bool = False) -> bool:
        visible = (method.is_public or method.is_protected) and method.name not in self._config.ignored_method_names
        if not accessor:
            visible = visible and not method.is_special_name
        return visible

    def is_visible_member(self, member: MemberSymbol) -> bool:
        if isinstance(member, PropertySymbol):
            if member.getter is not None:
                return self._is_visible_callable(member.getter, accessor=True)
            return member.setter is None and (member.is_public or member.is_protected)
        if isinstance(member, EventSymbol):
            if member.adder is not None:
                return self._is_visible_callable(member.adder, accessor=True)
            return member.is_public or member.is_protected
        if isinstance(member, (MethodSymbol, ConstructorSymbol)):
            return self._is_visible_callable(member)
        return member.is_public or member.is_protected

    def visible_types(self, unit: MetadataUnit) -> list[TypeSymbol]:
        return [t for t in unit.types if self.is_visible_type(t)]

    def _visible(self, members: Iterable[MemberSymbol], static: bool | None = None) -> list:
        chosen = [
            m for m in members if self.is_visible_member(m) and (static is None or _is_static(m) == static)
        ]
        return sorted(chosen, key=member_name)

    # =========================================================================
    # Shared pieces
    # =========================================================================

    def _node(self, symbol: Symbol) -> DocumentationNode | None:
        return self._resolver.resolve(symbol)

    def _section(self, renderer: MarkupRenderer, symbol: Symbol, tag: str) -> list[Block]:
        return blocks_of(renderer.render(section(self._node(symbol), tag)))

    def _summary_text(self, renderer: MarkupRenderer, symbol: Symbol) -> str:
        return renderer.render_text(section(self._node(symbol), "summary"), self._config.summary_max_length)

    def _badges(self, attributes: tuple[str, ...]) -> Paragraph | None:
        shown = [a for a in attributes if a not in self._config.ignored_attributes]
        if not shown:
            return None
        return Paragraph([Badge(a) for a in shown])

    def type_cell(self, renderer: MarkupRenderer, ref: TypeRef) -> Inline:
        """Link to a type when it is declared in an indexed unit, inline code otherwise."""
        name = display_name(ref)
        target = None if ref.is_generic_parameter else self._graph.find_type(ref)
        if target is not None and self._registry.is_indexed(target):
            return renderer.links.link(name, self._paths(target))
        return InlineCode(name)

    def member_cell(self, renderer: MarkupRenderer, member: MemberSymbol, text: str | None = None) -> Inline:
        name = text if text is not None else member_name(member)
        if member.declaring is not None and self._registry.is_indexed(member.declaring):
            return renderer.links.link(name, self._paths(member))
        return InlineCode(name)

    def _unit_header(self, renderer: MarkupRenderer, unit_name: str, framework: str | None) -> list[Block]:
        return [
            Heading(1, [Text(unit_name)]),
            Quote(
                [
                    Bold("Framework"),
                    Text(f": {framework or 'Unknown'}"),
                    LineBreak(),
                    Bold("Assembly"),
                    Text(": "),
                    renderer.links.link(unit_name, unit_path(unit_name)),
                ]
            ),
        ]

    # =========================================================================
    # Unit document
    # =========================================================================

    def build_unit_document(self, unit: MetadataUnit) -> Document:
        self._frameworks[unit.name] = unit.framework
        document = Document(title=unit.name)
        renderer = self.renderer(document)
        document.extend(self._unit_header(renderer, unit.name, unit.framework))

        if unit.references:
            document.extend(
                [
                    Heading(2, [Text("Assembly Dependencies")]),
                    BulletList([[Text(r)] for r in unit.references]),
                ]
            )

        types = self.visible_types(unit)
        for namespace, in_namespace in groupby(sorted(types, key=lambda t: t.namespace), key=lambda t: t.namespace):
            document.blocks.append(Heading(2, [Text(namespace)]))
            by_category = sorted(in_namespace, key=lambda t: list(TypeCategory).index(t.category))
            for category, in_category in groupby(by_category, key=lambda t: t.category):
                document.blocks.append(Heading(3, [Text(category.value)]))
                rows = [
                    [[self.type_cell(renderer, t.ref)], [Text(self._summary_text(renderer, t))]]
                    for t in sorted(in_category, key=self._type_sort_key)
                ]
                document.blocks.append(Table(["Name", "Summary"], rows))
        return document

    def _type_sort_key(self, type_symbol: TypeSymbol) -> str:
        base = type_symbol.base
        if base is not None and base.full_name != OBJECT.full_name and not type_symbol.is_value_type:
            return f"{display_name(base)}_{display_name(type_symbol.ref)}"
        return display_name(type_symbol.ref)

    # =========================================================================
    # Type document
    # =========================================================================

    def _type_heading(self, renderer: MarkupRenderer, type_symbol: TypeSymbol, title: str) -> list[Block]:
        unit = type_symbol.unit or ""
        framework = self._framework(unit)
        return [
            *self._unit_header(renderer, unit, framework),
            Heading(2, [Text(title)]),
            Quote([Bold("Namespace"), Text(": "), renderer.links.link(type_symbol.namespace, unit_path(unit))]),
        ]

    def _framework(self, unit_name: str) -> str | None:
        return self._frameworks.get(unit_name)

    def build_type_document(self, type_symbol: TypeSymbol) -> Document:
        title = f"{display_name(type_symbol.ref)} ({type_symbol.category.value})"
        document = Document(title=title)
        renderer = self.renderer(document, current_type=type_symbol)
        document.extend(self._type_heading(renderer, type_symbol, title))

        document.extend(self._section(renderer, type_symbol, "summary"))
        document.blocks.append(
            CodeBlock(syntax(type_symbol, self._graph.inherits(type_symbol)), self._config.code_language)
        )
        document.extend([self._badges(type_symbol.attributes)])
        document.extend(self._section(renderer, type_symbol, "remarks"))
        document.extend(self._section(renderer, type_symbol, "example"))

        if type_symbol.category is TypeCategory.ENUM:
            document.extend(self._enum_body(renderer, type_symbol))
        elif type_symbol.category is not TypeCategory.DELEGATE:
            document.extend(self._object_body(renderer, type_symbol))
        return document

    def _enum_body(self, renderer: MarkupRenderer, type_symbol: TypeSymbol) -> list[Block]:
        rows = [
            [[Text(f.name)], [Text(renderer.render_text(section(self._node(f), "summary")))]]
            for f in self._visible(type_symbol.fields)
        ]
        return [Table(["Name", "Summary"], rows)]

    def _member_list(self, renderer: MarkupRenderer, members: list[MemberSymbol]) -> Paragraph:
        content: list[Inline] = []
        seen: set[str] = set()
        for member in members:
            name = member_name(member)
            if name in seen:
                continue
            seen.add(name)
            if content:
                content.append(Text(", "))
            content.append(self.member_cell(renderer, member))
        return Paragraph(content)

    def _object_body(self, renderer: MarkupRenderer, type_symbol: TypeSymbol) -> list[Block]:
        blocks: list[Block] = []

        inherits = self._graph.inherits(type_symbol)
        if inherits:
            content: list[Inline] = []
            for ref in inherits:
                if content:
                    content.append(Text(", "))
                content.append(self.type_cell(renderer, ref))
            blocks.extend([Heading(3, [Text("Inherits")]), Paragraph(content)])

        static_fields = self._visible(type_symbol.fields, static=True)
        constants = [f for f in static_fields if f.is_constant]
        summaries = [
            ("Constants", constants),
            ("Fields", self._visible(type_symbol.fields, static=False)),
            ("Properties", self._visible(type_symbol.properties, static=False)),
            ("Methods", self._visible(type_symbol.methods, static=False)),
            ("Events", self._visible(type_symbol.events, static=False)),
            ("StaticFields", [f for f in static_fields if not f.is_constant]),
            ("StaticProperties", self._visible(type_symbol.properties, static=True)),
            ("StaticMethods", self._visible(type_symbol.methods, static=True)),
            ("StaticEvents", self._visible(type_symbol.events, static=True)),
        ]
        for key, members in summaries:
            if members:
                blocks.extend([Heading(3, [Text(to_header_string(key))]), self._member_list(renderer, members)])

        constructors = [c for c in type_symbol.constructors if self.is_visible_member(c)]
        if constructors:
            blocks.append(Heading(2, [Text("Constructors")]))
            for constructor in constructors:
                blocks.extend(self.callable_section(renderer, constructor))

        blocks.extend(self._member_tables(renderer, "Fields", type_symbol.fields, self._field_row))
        blocks.extend(self._member_tables(renderer, "Properties", type_symbol.properties, self._property_row))
        blocks.extend(self._member_tables(renderer, "Events", type_symbol.events, self._event_row))
        blocks.extend(self._member_tables(renderer, "Methods", type_symbol.methods, self._method_row))
        return blocks

    def _member_tables(self, renderer, title: str, members: list, row) -> list[Block]:
        instance = self._visible(members, static=False)
        static = self._visible(members, static=True)
        if not instance and not static:
            return []
        headers = {
            "Events": ["Name", "Handler Type", "Summary"],
            "Methods": ["Name", "Return Type", "Summary"],
        }.get(title, ["Name", "Type", "Summary"])

        blocks: list[Block] = [Heading(2, [Text(title)])]
        if instance:
            blocks.append(Heading(4, [Text("Instance")]))
            blocks.append(Table(headers, [row(renderer, m) for m in instance]))
        if static:
            if instance:
                blocks.append(Heading(4, [Text("Static")]))
            blocks.append(Table(headers, [row(renderer, m) for m in static]))
        return blocks

    def _field_row(self, renderer: MarkupRenderer, field: FieldSymbol) -> list[list[Inline]]:
        return [
            [self.member_cell(renderer, field)],
            [self.type_cell(renderer, field.field_type)],
            [Text(self._summary_text(renderer, field))],
        ]

    def _property_row(self, renderer: MarkupRenderer, prop: PropertySymbol) -> list[list[Inline]]:
        return [
            [self.member_cell(renderer, prop)],
            [self.type_cell(renderer, prop.property_type)],
            [Text(self._summary_text(renderer, prop))],
        ]

    def _event_row(self, renderer: MarkupRenderer, event: EventSymbol) -> list[list[Inline]]:
        return [
            [self.member_cell(renderer, event)],
            [self.type_cell(renderer, event.handler_type)],
            [Text(self._summary_text(renderer, event))],
        ]

    def _method_row(self, renderer: MarkupRenderer, method: MethodSymbol) -> list[list[Inline]]:
        signature = summarize(method_signature(method, compact=True), self._config.signature_max_length)
        return [
            [self.member_cell(renderer, method, signature)],
            [self.type_cell(renderer, method.return_type)],
            [Text(self._summary_text(renderer, method))],
        ]

    # =========================================================================
    # Member sections and member documents
    # =========================================================================

    def callable_section(self, renderer: MarkupRenderer, method: CallableSymbol) -> list[Block]:
        blocks: list[Block] = [Heading(3, [Text(method_signature(method, compact=True))])]
        blocks.extend(self._section(renderer, method, "summary"))
        blocks.append(CodeBlock(syntax(method), self._config.code_language))
        blocks.extend([self._badges(method.attributes)])
        blocks.extend(self._parameter_summary(renderer, method))
        blocks.extend(self._section(renderer, method, "remarks"))
        blocks.extend(self._section(renderer, method, "example"))
        return [b for b in blocks if b is not None]

    def _parameter_summary(self, renderer: MarkupRenderer, method: CallableSymbol) -> list[Block]:
        node = self._node(method)
        blocks: list[Block] = []
        if method.parameters:
            rows = [
                [
                    [Text(p.name)],
                    [self.type_cell(renderer, p.parameter_type)],
                    [Text(renderer.render_text(param_node(node, p.name), self._config.summary_max_length))],
                ]
                for p in method.parameters
            ]
            blocks.append(Table(["Name", "Type", "Summary"], rows))

        if isinstance(method, MethodSymbol):
            content: list[Inline] = [Bold("Returns"), Text(" - "), self.type_cell(renderer, method.return_type)]
            returns = renderer.render_text(section(node, "returns"), self._config.summary_max_length)
            if returns:
                content.append(Text(f" - {returns}"))
            blocks.append(Quote(content))
        return blocks

    def field_section(self, renderer: MarkupRenderer, field: FieldSymbol) -> list[Block]:
        blocks: list[Block] = [Heading(4, [Text(field.name)])]
        blocks.extend(self._section(renderer, field, "summary"))
        blocks.append(CodeBlock(syntax(field), self._config.code_language))
        blocks.extend([self._badges(field.attributes)])
        blocks.extend(self._section(renderer, field, "remarks"))
        blocks.extend(self._section(renderer, field, "example"))
        return [b for b in blocks if b is not None]

    def property_section(self, renderer: MarkupRenderer, prop: PropertySymbol) -> list[Block]:
        blocks: list[Block] = [Heading(3, [Text(member_name(prop))])]
        blocks.extend(self._section(renderer, prop, "summary"))
        blocks.append(CodeBlock(syntax(prop), self._config.code_language))
        if prop.getter is not None:
            blocks.append(Quote([Bold("Returns"), Text(": "), self.type_cell(renderer, prop.property_type)]))
        blocks.extend([self._badges(prop.attributes)])
        blocks.extend(self._section(renderer, prop, "remarks"))
        blocks.extend(self._section(renderer, prop, "example"))
        return [b for b in blocks if b is not None]

    def event_section(self, renderer: MarkupRenderer, event: EventSymbol) -> list[Block]:
        blocks: list[Block] = [Heading(4, [Text(event.name)])]
        blocks.extend(self._section(renderer, event, "summary"))
        blocks.append(CodeBlock(syntax(event), self._config.code_language))
        blocks.extend([self._badges(event.attributes)])
        blocks.append(Paragraph([Text("Type: "), InlineCode(display_name(event.handler_type))]))
        blocks.extend(self._section(renderer, event, "remarks"))
        blocks.extend(self._section(renderer, event, "example"))
        return [b for b in blocks if b is not None]

    def member_section(self, renderer: MarkupRenderer, member: MemberSymbol) -> list[Block]:
        if isinstance(member, FieldSymbol):
            return self.field_section(renderer, member)
        if isinstance(member, PropertySymbol):
            return self.property_section(renderer, member)
        if isinstance(member, EventSymbol):
            return self.event_section(renderer, member)
        if isinstance(member, (MethodSymbol, ConstructorSymbol)):
            return self.callable_section(renderer, member)
        raise ContractViolation.unsupported_kind(type(member).__name__)

    def build_member_document(self, members: list[MemberSymbol]) -> Document:
        """One document for every member sharing a name (overloads) on one type."""
        if not members:
            raise InternalError.unexpected("empty member group")
        first = members[0]
        owner = first.declaring
        if owner is None:
            raise ContractViolation.detached_member(first.name)
        if any(m.declaring is not owner for m in members):
            owners = sorted({display_name(m.declaring.ref) for m in members if m.declaring is not None})
            raise ContractViolation.mixed_member_group(member_name(first), owners)

        title = f"{display_name(owner.ref)}.{member_name(first)} ({first.kind.value})"
        document = Document(title=title)
        renderer = self.renderer(document, current_type=owner)
        document.extend(self._unit_header(renderer, owner.unit or "", self._framework(owner.unit or "")))
        document.blocks.append(Heading(2, [Text(title)]))
        document.blocks.append(
            Quote(
                [
                    Bold("Namespace"),
                    Text(": "),
                    renderer.links.link(owner.namespace, unit_path(owner.unit or "")),
                    LineBreak(),
                    Bold("Declaring Type"),
                    Text(": "),
                    self.type_cell(renderer, owner.ref),
                ]
            )
        )
        for position, member in enumerate(members):
            if position:
                document.blocks.append(Divider())
            document.extend(self.member_section(renderer, member))
        return document

    # =========================================================================
    # Whole unit
    # =========================================================================

    def member_groups(self, type_symbol: TypeSymbol) -> list[list[MemberSymbol]]:
        """Visible fields, properties, methods and events grouped by display name."""
        members: list[MemberSymbol] = [
            *self._visible(type_symbol.fields),
            *self._visible(type_symbol.properties),
            *self._visible(type_symbol.methods),
            *self._visible(type_symbol.events),
        ]
        groups: dict[str, list[MemberSymbol]] = {}
        for member in members:
            groups.setdefault(self._paths(member), []).append(member)
        return list(groups.values())

    def build_all(self, unit: MetadataUnit) -> Iterator[tuple[str, Document]]:
        """Every document of a unit as (link path, document) pairs."""
        yield unit_path(unit.name), self.build_unit_document(unit)
        for type_symbol in self.visible_types(unit):
            yield self._paths(type_symbol), self.build_type_document(type_symbol)
            if type_symbol.category in (TypeCategory.ENUM, TypeCategory.DELEGATE):
                continue
            for group in self.member_groups(type_symbol):
                yield self._paths(group[0]), self.build_member_document(group)
        log.debug("unit_documents_built", unit=unit.name)
