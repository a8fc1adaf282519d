"""Inheritance resolution for documentation marked ``<inheritdoc/>``.

Resolution Algorithm:
1. Look up the symbol's own node. Unless it is deferred, that is the answer.
2. Methods: the override root when the method overrides something,
   otherwise every interface member it implements (interface order).
3. Properties: the same two phases through the property's accessor, then
   re-derive the base or interface property by name.
4. A candidate that is itself deferred contributes its own candidates,
   depth first, so the first interface that eventually yields content wins.
5. A visited set keyed by documentation key bounds the walk. Only a key
   already on the chain leading to a candidate counts as a cycle; a key
   reached again through a second interface path is skipped quietly.
   Candidates in other units are looked up without raising, so a malformed
   source elsewhere reads as undocumented.
6. Parameters resolve their owning member, then pick the matching param.

Absent documentation is normal here. Nothing in this module raises for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docmark.core.logging import get_logger
from docmark.index.encoder import documentation_key
from docmark.index.nodes import DEFER_TAG, DocumentationNode, is_deferred, param_node
from docmark.metadata.models import (
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    Symbol,
)

if TYPE_CHECKING:
    from docmark.index.store import DocumentationRegistry
    from docmark.metadata.hierarchy import HierarchyGraph

log = get_logger(__name__)


class InheritanceResolver:
    """Finds the effective documentation node of a symbol.

    Usage::

        resolver = InheritanceResolver(registry, graph)
        node = resolver.resolve(dog_speak)
    """

    def __init__(
        self,
        registry: DocumentationRegistry,
        graph: HierarchyGraph,
        *,
        defer_tag: str = DEFER_TAG,
    ) -> None:
        self._registry = registry
        self._graph = graph
        self._defer_tag = defer_tag

    def resolve(self, symbol: Symbol) -> DocumentationNode | None:
        if isinstance(symbol, ParameterSymbol):
            if symbol.member is None:
                return None
            return param_node(self.resolve(symbol.member), symbol.name)

        node = self._registry.get(symbol)
        if not is_deferred(node, self._defer_tag):
            return node

        key = documentation_key(symbol)
        if not isinstance(symbol, (MethodSymbol, PropertySymbol)):
            log.warning("inheritdoc_unsupported_kind", key=key, kind=symbol.kind.value)
            return node

        # Entries carry the chain of keys that led to them
        visited = {key}
        cycle = False
        stack = [(c, (key,)) for c in reversed(self._candidates(symbol))]
        while stack:
            candidate, chain = stack.pop()
            candidate_key = documentation_key(candidate)
            if candidate_key in chain:
                cycle = True
                continue
            if candidate_key in visited:
                continue
            visited.add(candidate_key)

            found = self._registry.find(candidate)
            if found is not None and not is_deferred(found, self._defer_tag):
                log.debug("inheritdoc_resolved", key=key, source=candidate_key)
                return found
            next_chain = (*chain, candidate_key)
            stack.extend((c, next_chain) for c in reversed(self._candidates(candidate)))

        if cycle:
            log.warning("inheritdoc_cycle", key=key)
        else:
            log.warning("inheritdoc_unresolved", key=key)
        return None

    def _candidates(self, symbol: Symbol) -> list[Symbol]:
        if isinstance(symbol, MethodSymbol):
            return list(self._method_candidates(symbol))
        if isinstance(symbol, PropertySymbol):
            return list(self._property_candidates(symbol))
        return []

    def _method_candidates(self, method: MethodSymbol) -> list[MethodSymbol]:
        root = self._graph.override_root(method)
        if root is not method:
            return [root]
        return self._graph.interface_methods(method)

    def _property_candidates(self, prop: PropertySymbol) -> list[PropertySymbol]:
        accessor = prop.getter or prop.setter
        if accessor is None:
            return []

        root = self._graph.override_root(accessor)
        if root is not accessor:
            sources = [root]
        else:
            sources = self._graph.interface_methods(accessor)

        candidates: list[PropertySymbol] = []
        for source in sources:
            owner_prop = self._graph.property_named(source.declaring, prop.name)
            if owner_prop is None:
                owner_prop = self._graph.property_of(source)
            if owner_prop is not None and owner_prop is not prop:
                candidates.append(owner_prop)
        return candidates
