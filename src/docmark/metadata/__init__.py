"""Metadata model exports.

The hierarchy graph lives in ``docmark.metadata.hierarchy`` and is imported
from there directly.
"""

from docmark.metadata.models import (
    OBJECT,
    VOID,
    CallableSymbol,
    ConstructorSymbol,
    EventSymbol,
    FieldSymbol,
    MemberSymbol,
    MetadataUnit,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    Symbol,
    SymbolKind,
    TypeCategory,
    TypeRef,
    TypeShape,
    TypeSymbol,
    system,
)

__all__ = [
    "OBJECT",
    "VOID",
    "CallableSymbol",
    "ConstructorSymbol",
    "EventSymbol",
    "FieldSymbol",
    "MemberSymbol",
    "MetadataUnit",
    "MethodSymbol",
    "ParameterSymbol",
    "PropertySymbol",
    "Symbol",
    "SymbolKind",
    "TypeCategory",
    "TypeRef",
    "TypeShape",
    "TypeSymbol",
    "system",
]
