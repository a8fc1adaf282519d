"""Reflection model for one compiled type system.

An external loader (or a test) fabricates these descriptors; the core only
reads them. Two families live here:

- ``TypeRef``: a structural, immutable reference to a type as it appears in
  a signature (named, array, by-ref, pointer, or an unbound generic
  parameter).
- Symbols: the closed set of documentable things (types, methods,
  constructors, fields, properties, events, parameters). Members point back
  at their declaring ``TypeSymbol`` once added to it.

Descriptors are produced per metadata unit at load time and are read-only
thereafter.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar


class TypeShape(str, Enum):
    """Structural shape of a type reference."""

    NAMED = "named"
    ARRAY = "array"
    BY_REF = "by_ref"
    POINTER = "pointer"
    GENERIC_PARAMETER = "generic_parameter"


class SymbolKind(str, Enum):
    """Closed set of symbol categories."""

    TYPE = "Type"
    METHOD = "Method"
    CONSTRUCTOR = "Constructor"
    FIELD = "Field"
    PROPERTY = "Property"
    EVENT = "Event"
    PARAMETER = "Parameter"


class TypeCategory(str, Enum):
    """What kind of declaration a type is. Values double as display labels."""

    CLASS = "Class"
    STRUCT = "Struct"
    INTERFACE = "Interface"
    ENUM = "Enum"
    DELEGATE = "Delegate"


# ============================================================================
# TYPE REFERENCES
# ============================================================================


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Structural reference to a type.

    ``name`` is the metadata name. Generic types keep the CLR arity marker
    (``List`1``); constructed generics list their ``arguments``. Nested types
    point at their containing type through ``declaring`` instead of using a
    ``+`` separator.
    """

    shape: TypeShape
    name: str = ""
    namespace: str = ""
    declaring: TypeRef | None = None
    arguments: tuple[TypeRef, ...] = ()
    element: TypeRef | None = None
    rank: int = 1
    position: int = 0
    method_level: bool = False

    @classmethod
    def named(
        cls,
        namespace: str,
        name: str,
        *arguments: TypeRef,
        declaring: TypeRef | None = None,
    ) -> TypeRef:
        return cls(
            TypeShape.NAMED,
            name=name,
            namespace=namespace if declaring is None else declaring.namespace,
            declaring=declaring,
            arguments=tuple(arguments),
        )

    @classmethod
    def type_parameter(cls, position: int, name: str = "T") -> TypeRef:
        return cls(TypeShape.GENERIC_PARAMETER, name=name, position=position)

    @classmethod
    def method_parameter(cls, position: int, name: str = "T") -> TypeRef:
        return cls(TypeShape.GENERIC_PARAMETER, name=name, position=position, method_level=True)

    def array(self, rank: int = 1) -> TypeRef:
        return TypeRef(TypeShape.ARRAY, element=self, rank=rank)

    def by_ref(self) -> TypeRef:
        return TypeRef(TypeShape.BY_REF, element=self)

    def pointer(self) -> TypeRef:
        return TypeRef(TypeShape.POINTER, element=self)

    def construct(self, *arguments: TypeRef) -> TypeRef:
        """Same named type with different generic arguments."""
        return TypeRef(
            TypeShape.NAMED,
            name=self.name,
            namespace=self.namespace,
            declaring=self.declaring,
            arguments=tuple(arguments),
        )

    def substitute(self, arguments: tuple[TypeRef, ...]) -> TypeRef:
        """Replace type-level generic parameters with the given arguments.

        Used when walking from a constructed base type (``Base<int>``) into
        the members of its generic definition.
        """
        if not arguments:
            return self
        if self.shape is TypeShape.GENERIC_PARAMETER:
            if not self.method_level and self.position < len(arguments):
                return arguments[self.position]
            return self
        if self.shape is TypeShape.NAMED:
            if not self.arguments:
                return self
            return replace(self, arguments=tuple(a.substitute(arguments) for a in self.arguments))
        if self.element is None:
            return self
        return replace(self, element=self.element.substitute(arguments))

    @property
    def is_generic(self) -> bool:
        return self.shape is TypeShape.NAMED and bool(self.arguments)

    @property
    def is_generic_parameter(self) -> bool:
        return self.shape is TypeShape.GENERIC_PARAMETER

    @property
    def has_element(self) -> bool:
        return self.shape in (TypeShape.ARRAY, TypeShape.BY_REF, TypeShape.POINTER)

    @property
    def full_name(self) -> str:
        """Dotted name without generic arguments (``System.Collections.Generic.List`1``)."""
        if self.shape is not TypeShape.NAMED:
            return self.element.full_name if self.element is not None else self.name
        name = self.name.replace("+", ".")
        if self.declaring is not None:
            return f"{self.declaring.full_name}.{name}"
        return f"{self.namespace}.{name}" if self.namespace else name


def system(name: str, *arguments: TypeRef) -> TypeRef:
    """Reference to a type in the ``System`` namespace."""
    return TypeRef.named("System", name, *arguments)


OBJECT = system("Object")
VOID = system("Void")


# ============================================================================
# SYMBOLS
# ============================================================================


@dataclass(eq=False, kw_only=True)
class ParameterSymbol:
    """A method, constructor, or indexer parameter."""

    kind: ClassVar[SymbolKind] = SymbolKind.PARAMETER

    name: str
    parameter_type: TypeRef
    is_out: bool = False
    is_in: bool = False
    is_params: bool = False
    has_default: bool = False
    default: Any = None
    position: int = 0
    member: CallableSymbol | PropertySymbol | None = field(default=None, repr=False)

    @property
    def by_ref(self) -> bool:
        return self.parameter_type.shape is TypeShape.BY_REF


@dataclass(eq=False, kw_only=True)
class MemberSymbol:
    """Fields shared by every member. Not instantiated directly."""

    name: str
    modifiers: frozenset[str] = frozenset({"public"})
    attributes: tuple[str, ...] = ()
    declaring: TypeSymbol | None = field(default=None, repr=False)

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_protected(self) -> bool:
        return "protected" in self.modifiers

    @property
    def unit(self) -> str | None:
        return self.declaring.unit if self.declaring is not None else None


@dataclass(eq=False, kw_only=True)
class CallableSymbol(MemberSymbol):
    """Shared shape of methods and constructors."""

    parameters: list[ParameterSymbol] = field(default_factory=list)
    is_special_name: bool = False

    def __post_init__(self) -> None:
        for position, parameter in enumerate(self.parameters):
            parameter.position = position
            parameter.member = self


@dataclass(eq=False, kw_only=True)
class MethodSymbol(CallableSymbol):
    kind: ClassVar[SymbolKind] = SymbolKind.METHOD

    return_type: TypeRef = VOID
    generic_parameters: tuple[TypeRef, ...] = ()

    @property
    def generic_arity(self) -> int:
        return len(self.generic_parameters)

    @property
    def is_override(self) -> bool:
        return "override" in self.modifiers


@dataclass(eq=False, kw_only=True)
class ConstructorSymbol(CallableSymbol):
    kind: ClassVar[SymbolKind] = SymbolKind.CONSTRUCTOR

    name: str = ".ctor"


@dataclass(eq=False, kw_only=True)
class FieldSymbol(MemberSymbol):
    kind: ClassVar[SymbolKind] = SymbolKind.FIELD

    field_type: TypeRef
    is_literal: bool = False
    value: Any = None

    @property
    def is_constant(self) -> bool:
        return self.is_literal and "readonly" not in self.modifiers

    @property
    def is_readonly(self) -> bool:
        return "readonly" in self.modifiers


@dataclass(eq=False, kw_only=True)
class PropertySymbol(MemberSymbol):
    """A property. Modifiers are derived from the accessors when present."""

    kind: ClassVar[SymbolKind] = SymbolKind.PROPERTY

    property_type: TypeRef
    getter: MethodSymbol | None = None
    setter: MethodSymbol | None = None
    index_parameters: list[ParameterSymbol] = field(default_factory=list)

    def __post_init__(self) -> None:
        for position, parameter in enumerate(self.index_parameters):
            parameter.position = position
            parameter.member = self

    @property
    def accessors(self) -> tuple[MethodSymbol, ...]:
        return tuple(m for m in (self.getter, self.setter) if m is not None)

    @property
    def is_indexer(self) -> bool:
        return bool(self.index_parameters)


@dataclass(eq=False, kw_only=True)
class EventSymbol(MemberSymbol):
    kind: ClassVar[SymbolKind] = SymbolKind.EVENT

    handler_type: TypeRef
    adder: MethodSymbol | None = None
    remover: MethodSymbol | None = None

    @property
    def accessors(self) -> tuple[MethodSymbol, ...]:
        return tuple(m for m in (self.adder, self.remover) if m is not None)


@dataclass(eq=False, kw_only=True)
class TypeSymbol:
    """A declared type and its members."""

    kind: ClassVar[SymbolKind] = SymbolKind.TYPE

    ref: TypeRef
    category: TypeCategory = TypeCategory.CLASS
    base: TypeRef | None = None
    interfaces: tuple[TypeRef, ...] = ()
    modifiers: frozenset[str] = frozenset({"public"})
    attributes: tuple[str, ...] = ()
    members: list[MemberSymbol] = field(default_factory=list)
    delegate_invoke: MethodSymbol | None = None
    unit: str | None = None

    def __post_init__(self) -> None:
        for member in self.members:
            self._adopt(member)
        if self.delegate_invoke is not None:
            self.delegate_invoke.declaring = self

    def add(self, *members: MemberSymbol) -> TypeSymbol:
        """Attach members to this type and return it for chaining."""
        for member in members:
            self.members.append(member)
            self._adopt(member)
        return self

    def _adopt(self, member: MemberSymbol) -> None:
        member.declaring = self
        if isinstance(member, (PropertySymbol, EventSymbol)):
            for accessor in member.accessors:
                accessor.declaring = self

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def namespace(self) -> str:
        return self.ref.namespace

    @property
    def is_nested(self) -> bool:
        return self.ref.declaring is not None

    @property
    def is_value_type(self) -> bool:
        return self.category in (TypeCategory.STRUCT, TypeCategory.ENUM)

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    def _of(self, cls: type[Any]) -> Iterator[Any]:
        return (m for m in self.members if type(m) is cls)

    @property
    def methods(self) -> list[MethodSymbol]:
        return list(self._of(MethodSymbol))

    @property
    def constructors(self) -> list[ConstructorSymbol]:
        return list(self._of(ConstructorSymbol))

    @property
    def fields(self) -> list[FieldSymbol]:
        return list(self._of(FieldSymbol))

    @property
    def properties(self) -> list[PropertySymbol]:
        return list(self._of(PropertySymbol))

    @property
    def events(self) -> list[EventSymbol]:
        return list(self._of(EventSymbol))


Symbol = (
    TypeSymbol
    | MethodSymbol
    | ConstructorSymbol
    | FieldSymbol
    | PropertySymbol
    | EventSymbol
    | ParameterSymbol
)

RawDocumentation = str | bytes | ET.Element
DocumentationSource = RawDocumentation | Callable[[], RawDocumentation | None]


@dataclass(eq=False, kw_only=True)
class MetadataUnit:
    """One compiled binary's descriptors plus its optional documentation source."""

    name: str
    types: list[TypeSymbol] = field(default_factory=list)
    framework: str | None = None
    references: tuple[str, ...] = ()
    documentation: DocumentationSource | None = None

    def __post_init__(self) -> None:
        for type_symbol in self.types:
            type_symbol.unit = self.name

    def add(self, *types: TypeSymbol) -> MetadataUnit:
        for type_symbol in types:
            type_symbol.unit = self.name
            self.types.append(type_symbol)
        return self

    def symbols(self) -> Iterable[Symbol]:
        """Every type and member in metadata order (parameters excluded)."""
        for type_symbol in self.types:
            yield type_symbol
            yield from type_symbol.members  # type: ignore[misc]
