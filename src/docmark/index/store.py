"""Documentation index per metadata unit, and the registry that owns them.

Lifecycle of an index: EMPTY until first query, then a one-time build that
leaves it READY (source parsed), MISSING (unit ships no documentation) or
FAILED (source could not be parsed). Entries never change afterwards, so
readers need no locking once the build is done. The build itself is guarded
with double-checked locking.

With ``fail_on_malformed_source`` a FAILED index raises from its own queries
(``get``, ``keys``, ``len``). Status checks and lookups made on behalf of
another unit (``is_indexed``, ``find``) never raise, so one broken source
cannot stop the rest of a run.
"""

from __future__ import annotations

import threading
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator
from enum import Enum

from docmark.config.models import DocumentationConfig
from docmark.core.errors import DocumentationError
from docmark.core.logging import get_logger
from docmark.index.encoder import documentation_key
from docmark.index.nodes import DocumentationNode, param_node
from docmark.metadata.models import (
    MemberSymbol,
    MetadataUnit,
    ParameterSymbol,
    Symbol,
    TypeSymbol,
)

log = get_logger(__name__)


class IndexState(str, Enum):
    EMPTY = "empty"
    READY = "ready"
    MISSING = "missing"
    FAILED = "failed"


class DocumentationIndex:
    """Key -> documentation node map for one metadata unit."""

    def __init__(self, unit: MetadataUnit, *, fail_on_malformed_source: bool = False) -> None:
        self._unit = unit
        self._fail_on_malformed_source = fail_on_malformed_source
        self._entries: dict[str, DocumentationNode] = {}
        self._state = IndexState.EMPTY
        self._error: DocumentationError | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> IndexState:
        """Current lifecycle state. Does not trigger a build."""
        return self._state

    @property
    def is_indexed(self) -> bool:
        """Whether the unit's documentation source was located and parsed."""
        self._ensure_built()
        return self._state is IndexState.READY

    def get(self, key: str) -> DocumentationNode | None:
        """Node for a key.

        Raises:
            DocumentationError: The source is malformed and the index was
                created with ``fail_on_malformed_source``.
        """
        self._ensure_built()
        self._raise_if_failed()
        return self._entries.get(key)

    def find(self, key: str) -> DocumentationNode | None:
        """Like ``get``, but a failed source reads as undocumented."""
        self._ensure_built()
        return self._entries.get(key)

    def keys(self) -> Iterator[str]:
        self._ensure_built()
        self._raise_if_failed()
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        self._ensure_built()
        return key in self._entries

    def __len__(self) -> int:
        self._ensure_built()
        self._raise_if_failed()
        return len(self._entries)

    def _raise_if_failed(self) -> None:
        if self._error is not None and self._fail_on_malformed_source:
            raise self._error

    def _ensure_built(self) -> None:
        if self._state is not IndexState.EMPTY:
            return
        with self._lock:
            if self._state is not IndexState.EMPTY:
                return
            self._build()

    def _build(self) -> None:
        unit = self._unit.name
        source = self._unit.documentation
        if callable(source):
            try:
                source = source()
            except OSError as e:
                self._state = IndexState.MISSING
                error = DocumentationError.unavailable(unit, str(e))
                log.warning("documentation_source_unavailable", unit=unit, error=str(error))
                return

        if source is None:
            self._state = IndexState.MISSING
            log.debug("documentation_source_missing", unit=unit)
            return

        try:
            root = source if isinstance(source, ET.Element) else ET.fromstring(source)
        except ET.ParseError as e:
            self._error = DocumentationError.malformed_source(unit, str(e))
            self._state = IndexState.FAILED
            log.error(
                "documentation_source_malformed",
                unit=unit,
                code=self._error.code.value,
                error=str(self._error),
            )
            return

        entries: dict[str, DocumentationNode] = {}
        duplicates = 0
        for member in root.iter("member"):
            key = member.get("name")
            if not key:
                continue
            if key in entries:
                duplicates += 1
                continue
            entries[key] = member

        # Publish the finished map before flipping state; readers skip the lock
        self._entries = entries
        self._state = IndexState.READY
        log.debug("documentation_index_built", unit=unit, entries=len(entries), duplicates=duplicates)


def _unit_of(symbol: Symbol) -> str | None:
    if isinstance(symbol, (TypeSymbol, MemberSymbol)):
        return symbol.unit
    if isinstance(symbol, ParameterSymbol):
        return symbol.member.unit if symbol.member is not None else None
    return None


class DocumentationRegistry:
    """Owns one lazily built ``DocumentationIndex`` per metadata unit.

    Units never unload mid-run, so an index lives as long as the registry.

    Usage::

        registry = DocumentationRegistry(units)
        node = registry.get(method_symbol)
        if registry.is_indexed(method_symbol.declaring):
            ...
    """

    def __init__(
        self,
        units: Iterable[MetadataUnit] = (),
        *,
        config: DocumentationConfig | None = None,
    ) -> None:
        self._config = config or DocumentationConfig()
        self._indices: dict[str, DocumentationIndex] = {}
        for unit in units:
            self.register(unit)

    def register(self, unit: MetadataUnit) -> DocumentationIndex:
        """Add a unit. Registering the same unit name twice returns the existing index."""
        existing = self._indices.get(unit.name)
        if existing is not None:
            return existing
        index = DocumentationIndex(
            unit,
            fail_on_malformed_source=self._config.fail_on_malformed_source,
        )
        self._indices[unit.name] = index
        return index

    def index_for(self, unit_name: str | None) -> DocumentationIndex | None:
        if unit_name is None:
            return None
        return self._indices.get(unit_name)

    def __iter__(self) -> Iterator[DocumentationIndex]:
        return iter(self._indices.values())

    def get(self, symbol: Symbol) -> DocumentationNode | None:
        """Direct documentation node of a symbol, without inheritance resolution.

        Parameters resolve through their owning member's node and select the
        ``param`` child whose name matches.
        """
        if isinstance(symbol, ParameterSymbol):
            if symbol.member is None:
                return None
            return param_node(self.get(symbol.member), symbol.name)

        index = self.index_for(_unit_of(symbol))
        if index is None:
            return None
        return index.get(documentation_key(symbol))

    def find(self, symbol: Symbol) -> DocumentationNode | None:
        """``get`` for a symbol reached from another unit; never raises."""
        if isinstance(symbol, ParameterSymbol):
            if symbol.member is None:
                return None
            return param_node(self.find(symbol.member), symbol.name)

        index = self.index_for(_unit_of(symbol))
        if index is None:
            return None
        return index.find(documentation_key(symbol))

    def get_by_id(self, key: str) -> DocumentationNode | None:
        """Look a raw identifier up across every registered unit."""
        for index in self._indices.values():
            node = index.find(key)
            if node is not None:
                return node
        return None

    def is_indexed(self, target: Symbol | str | None) -> bool:
        """Whether the target's unit had a documentation source that parsed.

        Accepts a symbol (its owning unit is used) or a unit name.
        """
        unit_name = target if isinstance(target, str) or target is None else _unit_of(target)
        index = self.index_for(unit_name)
        return index is not None and index.is_indexed
