"""Logical output paths used as link targets.

Paths are posix-style and relative (``Zoo/Animals/Dog/Speak``). Writing
anything to disk is left to the output encoder.
"""

from __future__ import annotations

from collections.abc import Callable

from docmark.core.text import sanitize_path
from docmark.metadata.models import (
    MemberSymbol,
    ParameterSymbol,
    Symbol,
    TypeSymbol,
)
from docmark.render.names import display_name, member_name

PathResolver = Callable[[Symbol], str]


def _join(*parts: str | None) -> str:
    return sanitize_path("/".join(p for p in parts if p))


def unit_path(unit_name: str) -> str:
    return _join(unit_name)


def type_path(type_symbol: TypeSymbol) -> str:
    """``<unit>/<namespace>/<Type>``; nested types keep their outer name."""
    return _join(type_symbol.unit, type_symbol.namespace, display_name(type_symbol.ref).replace(".", "+"))


def member_path(member: MemberSymbol) -> str:
    """Overloads share one path; the member document holds every overload."""
    if member.declaring is None:
        return _join(member.unit, member_name(member))
    name = member_name(member).split("<", 1)[0]
    return _join(type_path(member.declaring), name)


def symbol_path(symbol: Symbol) -> str:
    if isinstance(symbol, TypeSymbol):
        return type_path(symbol)
    if isinstance(symbol, ParameterSymbol):
        if symbol.member is None:
            return ""
        return member_path(symbol.member)
    return member_path(symbol)
