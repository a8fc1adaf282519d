"""Human-readable names and declaration syntax for symbols.

Names read the way the type would be written in C# source: keyword aliases
for primitives, ``List<int>`` for generics, ``int[,]`` for arrays, and
``Outer.Inner`` for nested types.
"""

from __future__ import annotations

from typing import Any

from docmark.core.text import collapse_spaces
from docmark.index.encoder import strip_arity
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
    TypeCategory,
    TypeRef,
    TypeShape,
    TypeSymbol,
)

KEYWORD_ALIASES = {
    "System.Boolean": "bool",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Int16": "short",
    "System.UInt16": "ushort",
    "System.Int32": "int",
    "System.UInt32": "uint",
    "System.Int64": "long",
    "System.UInt64": "ulong",
    "System.Single": "float",
    "System.Double": "double",
    "System.Decimal": "decimal",
    "System.Char": "char",
    "System.String": "string",
    "System.Object": "object",
    "System.Void": "void",
}


def display_name(ref: TypeRef) -> str:
    """Type name as written in source (``Dictionary<string, int>``)."""
    if ref.shape is TypeShape.BY_REF:
        return display_name(ref.element) if ref.element is not None else ""
    if ref.shape is TypeShape.POINTER:
        return f"{display_name(ref.element)}*" if ref.element is not None else "*"
    if ref.shape is TypeShape.ARRAY:
        inner = display_name(ref.element) if ref.element is not None else ""
        return f"{inner}[{',' * (ref.rank - 1)}]"
    if ref.shape is TypeShape.GENERIC_PARAMETER:
        return ref.name
    if not ref.arguments and ref.full_name in KEYWORD_ALIASES:
        return KEYWORD_ALIASES[ref.full_name]
    prefix = f"{display_name(ref.declaring)}." if ref.declaring is not None else ""
    name = strip_arity(ref.name.replace("+", "."))
    if ref.arguments:
        name += "<" + ", ".join(display_name(a) for a in ref.arguments) + ">"
    return prefix + name


def member_name(member: MemberSymbol | ParameterSymbol) -> str:
    """Short name of a member (``Add<T>``, ``Indexer``, constructor type name)."""
    if isinstance(member, MethodSymbol):
        if member.generic_parameters:
            arguments = ", ".join(display_name(t) for t in member.generic_parameters)
            return f"{strip_arity(member.name)}<{arguments}>"
        return member.name
    if isinstance(member, ConstructorSymbol):
        if member.declaring is None:
            return member.name
        return strip_arity(member.declaring.ref.name)
    if isinstance(member, PropertySymbol):
        return "Indexer" if member.is_indexer else member.name
    return member.name


def symbol_name(symbol: Symbol) -> str:
    if isinstance(symbol, TypeSymbol):
        return display_name(symbol.ref)
    return member_name(symbol)


def qualified_name(member: MemberSymbol, current_type: TypeSymbol | None = None) -> str:
    """``Type.Member`` unless the member belongs to the current type."""
    name = member_name(member)
    if member.declaring is not None and member.declaring is not current_type:
        return f"{display_name(member.declaring.ref)}.{name}"
    return name


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def parameter_signature(parameter: ParameterSymbol, compact: bool = True) -> str:
    """``ref int`` (compact) or ``ref int count = 0`` (full)."""
    prefix = ""
    if parameter.by_ref:
        if parameter.is_out:
            prefix += "out "
        elif parameter.is_in:
            prefix += "in "
        else:
            prefix += "ref "
    if parameter.is_params:
        prefix += "params "

    signature = f"{prefix}{display_name(parameter.parameter_type)}"
    if not compact:
        signature += f" {parameter.name}"
        if parameter.has_default:
            signature += f" = {_literal(parameter.default)}"
    return signature.strip()


def parameters(parameters: list[ParameterSymbol], compact: bool = True) -> str:
    return ", ".join(parameter_signature(p, compact) for p in parameters)


def method_signature(callable_: CallableSymbol, compact: bool = True) -> str:
    """``Add(int, int)`` (compact) or ``Add(int x, int y)``."""
    return f"{member_name(callable_)}({parameters(callable_.parameters, compact)})"


# =============================================================================
# Syntax lines
# =============================================================================


def _visibility(modifiers: frozenset[str]) -> list[str]:
    if "public" in modifiers:
        return ["public"]
    if "protected" in modifiers:
        return ["protected"]
    return []


def type_modifiers(type_symbol: TypeSymbol) -> list[str]:
    modifiers = _visibility(type_symbol.modifiers)
    if type_symbol.category is TypeCategory.CLASS:
        if "static" in type_symbol.modifiers:
            modifiers.append("static")
        elif "abstract" in type_symbol.modifiers:
            modifiers.append("abstract")
        elif "sealed" in type_symbol.modifiers:
            modifiers.append("sealed")
    modifiers.append(type_symbol.category.value.lower())
    return modifiers


def type_syntax(type_symbol: TypeSymbol, inherits: list[TypeRef]) -> str:
    """``public abstract class Animal : IPet``."""
    if type_symbol.category is TypeCategory.DELEGATE:
        return delegate_syntax(type_symbol)
    text = f"{' '.join(type_modifiers(type_symbol))} {display_name(type_symbol.ref)}"
    if inherits:
        text += " : " + ", ".join(display_name(t) for t in inherits)
    return collapse_spaces(text).strip()


def delegate_syntax(type_symbol: TypeSymbol) -> str:
    invoke = type_symbol.delegate_invoke
    head = " ".join(type_modifiers(type_symbol))
    if invoke is None:
        return collapse_spaces(f"{head} void {display_name(type_symbol.ref)}()").strip()
    signature = f"{display_name(type_symbol.ref)}({parameters(invoke.parameters, False)})"
    return collapse_spaces(f"{head} {display_name(invoke.return_type)} {signature}").strip()


def field_syntax(field: FieldSymbol) -> str:
    words = _visibility(field.modifiers)
    if field.is_constant:
        words.append("const")
    elif field.is_static:
        words.append("static")
    if field.is_readonly:
        words.append("readonly")
    text = f"{' '.join(words)} {display_name(field.field_type)} {field.name}"
    if field.is_literal:
        text += f" = {_literal(field.value)}"
    return collapse_spaces(text).strip()


def _accessor_owner_modifiers(accessors: tuple[MethodSymbol, ...], fallback: frozenset[str]) -> list[str]:
    if not accessors:
        words = _visibility(fallback)
        if "static" in fallback:
            words.append("static")
        return words
    words = []
    if any(a.is_public for a in accessors):
        words.append("public")
    elif any(a.is_protected for a in accessors):
        words.append("protected")
    if any(a.is_static for a in accessors):
        words.append("static")
    return words


def _accessor_list(pairs: list[tuple[MethodSymbol | None, str]], owner_public: bool) -> str:
    parts = []
    for accessor, keyword in pairs:
        if accessor is None or not (accessor.is_public or accessor.is_protected):
            continue
        if accessor.is_protected and not accessor.is_public and owner_public:
            parts.append(f"protected {keyword};")
        else:
            parts.append(f"{keyword};")
    return " ".join(parts)


def property_modifiers(prop: PropertySymbol) -> list[str]:
    return _accessor_owner_modifiers(prop.accessors, prop.modifiers)


def property_syntax(prop: PropertySymbol) -> str:
    """``public int Count { get; protected set; }``."""
    modifiers = property_modifiers(prop)
    accessors = _accessor_list([(prop.getter, "get"), (prop.setter, "set")], "public" in modifiers)
    if prop.is_indexer:
        head = f"this[{parameters(prop.index_parameters, False)}]"
    else:
        head = prop.name
    text = f"{' '.join(modifiers)} {display_name(prop.property_type)} {head} {{ {accessors} }}"
    return collapse_spaces(text).strip()


def event_syntax(event: EventSymbol) -> str:
    """``public EventHandler Changed { add; remove; }``."""
    modifiers = _accessor_owner_modifiers(event.accessors, event.modifiers)
    accessors = _accessor_list([(event.adder, "add"), (event.remover, "remove")], "public" in modifiers)
    text = f"{' '.join(modifiers)} {display_name(event.handler_type)} {event.name} {{ {accessors} }}"
    return collapse_spaces(text).strip()


def method_modifiers(callable_: CallableSymbol) -> list[str]:
    words = []
    for modifier in ("public", "protected", "static", "abstract", "virtual", "override"):
        if modifier in callable_.modifiers:
            words.append(modifier)
    return words


def method_syntax(callable_: CallableSymbol) -> str:
    """``public virtual string Speak(int times)``."""
    return_name = display_name(callable_.return_type) if isinstance(callable_, MethodSymbol) else ""
    signature = f"{member_name(callable_)}({parameters(callable_.parameters, False)})"
    return collapse_spaces(f"{' '.join(method_modifiers(callable_))} {return_name} {signature}").strip()


def syntax(symbol: Symbol, inherits: list[TypeRef] | None = None) -> str:
    if isinstance(symbol, TypeSymbol):
        return type_syntax(symbol, inherits or [])
    if isinstance(symbol, FieldSymbol):
        return field_syntax(symbol)
    if isinstance(symbol, PropertySymbol):
        return property_syntax(symbol)
    if isinstance(symbol, EventSymbol):
        return event_syntax(symbol)
    if isinstance(symbol, (MethodSymbol, ConstructorSymbol)):
        return method_syntax(symbol)
    if isinstance(symbol, ParameterSymbol):
        return parameter_signature(symbol, compact=False)
    return ""
