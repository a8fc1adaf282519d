"""Read-only hierarchy graph and symbol table over loaded metadata units.

Built once at load time:
- type key -> TypeSymbol, to follow base-type and interface references
- canonical id -> symbol, to resolve cross-references in documentation
- override method -> override root (the virtual declaration it overrides)

Interface dispatch maps (signature -> interface method) are built on first
use per constructed interface and cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from docmark.core.logging import get_logger
from docmark.index.encoder import (
    documentation_key,
    encode,
    signature_key,
    simple_name,
    type_key,
)
from docmark.metadata.models import (
    OBJECT,
    CallableSymbol,
    EventSymbol,
    MethodSymbol,
    MetadataUnit,
    PropertySymbol,
    Symbol,
    TypeRef,
    TypeShape,
    TypeSymbol,
)

log = get_logger(__name__)


def _callables(type_symbol: TypeSymbol) -> Iterator[MethodSymbol]:
    """Methods plus property and event accessors, in declaration order."""
    for member in type_symbol.members:
        if type(member) is MethodSymbol:
            yield member
        elif isinstance(member, (PropertySymbol, EventSymbol)):
            yield from member.accessors


class HierarchyGraph:
    """Adjacency lists derived from metadata, fixed after ``build``.

    Usage::

        graph = HierarchyGraph.build(units)
        root = graph.override_root(method)
        for candidate in graph.interface_methods(method):
            ...
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeSymbol] = {}
        self._symbols: dict[str, Symbol] = {}
        self._override_roots: dict[MethodSymbol, MethodSymbol] = {}
        self._dispatch: dict[tuple[TypeSymbol, tuple[TypeRef, ...]], dict[str, MethodSymbol]] = {}

    @classmethod
    def build(cls, units: Iterable[MetadataUnit]) -> HierarchyGraph:
        graph = cls()
        units = list(units)
        for unit in units:
            graph._add_unit(unit)
        for unit in units:
            for type_symbol in unit.types:
                for method in _callables(type_symbol):
                    if method.is_override:
                        graph._override_roots[method] = graph._walk_override_chain(method)
        log.debug(
            "hierarchy_built",
            units=len(units),
            types=len(graph._types),
            overrides=len(graph._override_roots),
        )
        return graph

    def _add_unit(self, unit: MetadataUnit) -> None:
        for type_symbol in unit.types:
            self._types.setdefault(type_symbol.ref.full_name, type_symbol)
            for symbol in (type_symbol, *type_symbol.members):
                self._symbols.setdefault(encode(symbol), symbol)
                if isinstance(symbol, EventSymbol):
                    self._symbols.setdefault(documentation_key(symbol), symbol)

    def _walk_override_chain(self, method: MethodSymbol) -> MethodSymbol:
        owner = method.declaring
        if owner is None:
            return method
        key = signature_key(method)
        root = method
        seen = {owner}
        base_ref = owner.base
        while base_ref is not None:
            base = self.find_type(base_ref)
            if base is None or base in seen:
                break
            seen.add(base)
            found = next(
                (m for m in _callables(base) if signature_key(m, base_ref.arguments) == key),
                None,
            )
            if found is not None:
                root = found
                if not found.is_override:
                    break
            base_ref = base.base.substitute(base_ref.arguments) if base.base is not None else None
        return root

    # =========================================================================
    # Lookups
    # =========================================================================

    def find_type(self, ref: TypeRef | None) -> TypeSymbol | None:
        """Definition of a named type; arrays, by-refs and pointers unwrap to their element."""
        while ref is not None and ref.has_element:
            ref = ref.element
        if ref is None or ref.shape is not TypeShape.NAMED:
            return None
        return self._types.get(ref.full_name)

    def find_symbol(self, key: str) -> Symbol | None:
        """Symbol for a canonical id, or None when no loaded unit declares it."""
        return self._symbols.get(key)

    def inherits(self, type_symbol: TypeSymbol) -> list[TypeRef]:
        """Base type (skipping ``System.Object`` and value types) then interfaces."""
        inherits: list[TypeRef] = []
        base = type_symbol.base
        if base is not None and not type_symbol.is_value_type and base.full_name != OBJECT.full_name:
            inherits.append(base)
        inherits.extend(type_symbol.interfaces)
        return inherits

    def all_interfaces(self, type_symbol: TypeSymbol) -> list[TypeRef]:
        """Every interface implemented by a type, its bases, and inherited interfaces.

        Metadata order: the type's own list first, then what bases and base
        interfaces contribute. Duplicates keep their first position.
        """
        result: list[TypeRef] = []
        seen_keys: set[str] = set()
        seen_types: set[TypeSymbol] = set()
        pending: list[TypeSymbol] = [type_symbol]
        while pending:
            current = pending.pop(0)
            if current in seen_types:
                continue
            seen_types.add(current)
            for ref in current.interfaces:
                key = type_key(ref, parameter_site=True)
                if key in seen_keys:
                    continue
                seen_keys.add(key)
                result.append(ref)
                interface = self.find_type(ref)
                if interface is not None:
                    pending.append(interface)
            base = self.find_type(current.base)
            if base is not None:
                pending.append(base)
        return result

    def override_root(self, method: MethodSymbol) -> MethodSymbol:
        """The virtual declaration an override ultimately overrides (itself if none)."""
        return self._override_roots.get(method, method)

    def interface_dispatch(self, interface_ref: TypeRef) -> dict[str, MethodSymbol]:
        """Signature -> interface method map for a (possibly constructed) interface."""
        interface = self.find_type(interface_ref)
        if interface is None:
            return {}
        cache_key = (interface, interface_ref.arguments)
        dispatch = self._dispatch.get(cache_key)
        if dispatch is None:
            dispatch = {}
            for method in _callables(interface):
                dispatch.setdefault(signature_key(method, interface_ref.arguments), method)
            self._dispatch[cache_key] = dispatch
        return dispatch

    def interface_methods(self, method: CallableSymbol) -> list[MethodSymbol]:
        """Interface members a method implements, in interface enumeration order."""
        owner = method.declaring
        if owner is None:
            return []
        key = signature_key(method)
        matches: list[MethodSymbol] = []
        for interface_ref in self.all_interfaces(owner):
            candidate = self.interface_dispatch(interface_ref).get(key)
            if candidate is not None and candidate is not method:
                matches.append(candidate)
        return matches

    def property_named(self, type_symbol: TypeSymbol | None, name: str) -> PropertySymbol | None:
        if type_symbol is None:
            return None
        wanted = simple_name(name)
        return next((p for p in type_symbol.properties if simple_name(p.name) == wanted), None)

    def property_of(self, accessor: MethodSymbol) -> PropertySymbol | None:
        """Property owning an accessor method."""
        owner = accessor.declaring
        if owner is None:
            return None
        return next((p for p in owner.properties if accessor in p.accessors), None)

