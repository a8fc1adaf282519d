"""Symbol identifier encoder.

Maps a symbol descriptor to the canonical identifier that keys its entry in
a documentation source. Pure and deterministic; no I/O.

Grammar::

    id        := type-id | member-id
    type-id   := "T:" type-key
    member-id := ("M:" | "F:" | "P:" | "") type-key "." member-name
                 [generic-arity] [param-list]
    generic-arity := "``" 1*DIGIT
    param-list    := "(" type-key *("," type-key) ")"
    type-key  := dotted-name | dotted-name "{" type-key *("," type-key) "}"
               | "`" DIGIT | "``" DIGIT

Known quirks kept on purpose because existing documentation sources depend
on the literal strings:

- Events carry no kind letter (``Ns.Type.Changed``). The documentation
  source itself tags them ``E:``; see ``documentation_key``.
- Array rank and bounds are discarded, so ``int[]`` and ``int[,]`` collide.
- A generic type outside a parameter list keeps its arity marker and drops
  its arguments (``T:Ns.List`1``); inside a parameter list the marker is
  dropped and the arguments are spelled out (``Ns.List{System.Int32}``).
"""

from __future__ import annotations

import re

from docmark.core.errors import ContractViolation
from docmark.metadata.models import (
    CallableSymbol,
    ConstructorSymbol,
    EventSymbol,
    FieldSymbol,
    MemberSymbol,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    Symbol,
    TypeRef,
    TypeShape,
    TypeSymbol,
)

CONSTRUCTOR_NAME = "#ctor"

_ARITY_MARKER = re.compile(r"`\d+$")


def strip_arity(name: str) -> str:
    """Drop a trailing CLR arity marker (``List`1`` -> ``List``)."""
    return _ARITY_MARKER.sub("", name)


def simple_name(name: str) -> str:
    """Last dotted segment; explicit interface implementations carry a qualified name."""
    return name.rsplit(".", 1)[-1] if "." in name.lstrip(".") else name


def type_key(ref: TypeRef, parameter_site: bool = False) -> str:
    """Canonical key of a type reference.

    Args:
        ref: Type reference to encode.
        parameter_site: True when the type appears in a method parameter list.
    """
    if ref.shape is TypeShape.BY_REF:
        key = type_key(_element(ref), parameter_site)
        return f"{key}@" if parameter_site else key
    if ref.shape in (TypeShape.ARRAY, TypeShape.POINTER):
        return type_key(_element(ref), parameter_site)
    if ref.shape is TypeShape.GENERIC_PARAMETER:
        return f"``{ref.position}" if ref.method_level else f"`{ref.position}"
    if ref.shape is TypeShape.NAMED:
        if ref.is_generic and parameter_site:
            arguments = ",".join(type_key(a, True) for a in ref.arguments)
            return f"{strip_arity(ref.full_name)}{{{arguments}}}"
        return ref.full_name
    raise ContractViolation.unsupported_shape(ref.shape)


def _element(ref: TypeRef) -> TypeRef:
    if ref.element is None:
        raise ContractViolation.unsupported_shape(f"{ref.shape.value} without element type")
    return ref.element


def _owner_key(member: MemberSymbol) -> str:
    if member.declaring is None:
        raise ContractViolation.detached_member(member.name)
    return type_key(member.declaring.ref)


def _parameter_list(callable_: CallableSymbol, arguments: tuple[TypeRef, ...] = ()) -> str:
    keys = [type_key(p.parameter_type.substitute(arguments), True) for p in callable_.parameters]
    # Zero parameters omit the parentheses entirely
    return f"({','.join(keys)})" if keys else ""


def _generic_arity(callable_: CallableSymbol) -> str:
    if isinstance(callable_, MethodSymbol) and callable_.generic_arity:
        return f"``{callable_.generic_arity}"
    return ""


def _callable_key(callable_: CallableSymbol) -> str:
    name = CONSTRUCTOR_NAME if isinstance(callable_, ConstructorSymbol) else callable_.name
    return f"{_owner_key(callable_)}.{name}{_generic_arity(callable_)}{_parameter_list(callable_)}"


def encode(symbol: Symbol) -> str:
    """Canonical identifier for a symbol.

    Raises:
        ContractViolation: For parameters (they have no standalone id) and
            anything outside the closed symbol set.
    """
    if isinstance(symbol, TypeSymbol):
        return f"T:{type_key(symbol.ref)}"
    if isinstance(symbol, (MethodSymbol, ConstructorSymbol)):
        return f"M:{_callable_key(symbol)}"
    if isinstance(symbol, FieldSymbol):
        return f"F:{_owner_key(symbol)}.{symbol.name}"
    if isinstance(symbol, PropertySymbol):
        return f"P:{_owner_key(symbol)}.{symbol.name}"
    if isinstance(symbol, EventSymbol):
        return f"{_owner_key(symbol)}.{symbol.name}"
    if isinstance(symbol, ParameterSymbol):
        raise ContractViolation.unsupported_kind(symbol.kind)
    raise ContractViolation.unsupported_kind(type(symbol).__name__)


def documentation_key(symbol: Symbol) -> str:
    """Key used to look a symbol up in a documentation source.

    Identical to ``encode`` except for events, whose entries the
    documentation source tags with ``E:``.
    """
    if isinstance(symbol, EventSymbol):
        return f"E:{encode(symbol)}"
    return encode(symbol)


def signature_key(callable_: CallableSymbol, arguments: tuple[TypeRef, ...] = ()) -> str:
    """Owner-independent signature used to match overrides and interface members.

    Args:
        callable_: Method or constructor to describe.
        arguments: Generic arguments of the constructed owner, substituted for
            type-level generic parameters before encoding.
    """
    name = CONSTRUCTOR_NAME if isinstance(callable_, ConstructorSymbol) else simple_name(callable_.name)
    return f"{name}{_generic_arity(callable_)}{_parameter_list(callable_, arguments)}"
