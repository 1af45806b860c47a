"""
type_info_ext.py
Questions asked about a parsed type expression while turning it into definition items:
what kind of declaration it is, and what its (normalized) call arguments are.
"""
from typing import List, Mapping, Optional

from definitions_item import DeclarationArgument, DeclarationKind
from type_info import (
    FunctionType,
    IntersectionType,
    OptionalType,
    ReferenceType,
    StringLiteralType,
    TableType,
    TypeInfo,
    TypeofType,
    UnionType,
    VariadicType,
)


def classify_kind(type_info: TypeInfo) -> DeclarationKind:
    """
    Infer the declaration kind from the shape of a type expression.

    Optionals take the kind of their base. A union or intersection takes the kind
    shared by all of its members, or OTHER when the members disagree.
    """
    if isinstance(type_info, TableType):
        return DeclarationKind.TABLE
    if isinstance(type_info, FunctionType):
        return DeclarationKind.FUNCTION
    if isinstance(type_info, (ReferenceType, StringLiteralType, TypeofType)):
        return DeclarationKind.PROPERTY
    if isinstance(type_info, OptionalType):
        return classify_kind(type_info.base)
    if isinstance(type_info, (UnionType, IntersectionType)):
        kinds = {classify_kind(member) for member in type_info.members}
        if len(kinds) == 1:
            return kinds.pop()
    return DeclarationKind.OTHER


def _is_nil(type_info: TypeInfo) -> bool:
    return isinstance(type_info, ReferenceType) and type_info.name == "nil" and not type_info.arguments


def _collect_overloads(type_info: TypeInfo) -> List[FunctionType]:
    if isinstance(type_info, FunctionType):
        return [type_info]
    if isinstance(type_info, OptionalType):
        return _collect_overloads(type_info.base)
    if isinstance(type_info, (UnionType, IntersectionType)):
        overloads = []
        for member in type_info.members:
            if _is_nil(member):
                continue
            member_overloads = _collect_overloads(member)
            if not member_overloads:
                # Not every member is callable
                return []
            overloads.extend(member_overloads)
        return overloads
    return []


def _argument_name(argument) -> str:
    if argument.is_variadic:
        return "..."
    return argument.name or "_"


def _argument_type(argument) -> str:
    # ...number is listed as "...": number; a generic pack keeps its T... form
    if isinstance(argument.type_info, VariadicType):
        return argument.type_info.inner.render()
    return argument.type_info.render()


class _MergedArgument:
    def __init__(self, name: str):
        self.name = name
        self.types: List[str] = []
        self.seen = 0


def normalize_arguments(type_info: TypeInfo, type_lookup: Mapping[str, TypeInfo]) -> Optional[List[DeclarationArgument]]:
    """
    Normalized arguments of a callable type, or None when it is not callable.

    A plain reference to a registered type is resolved once through ``type_lookup``
    (one hop only). Overloads (unions/intersections of function types) are merged
    position by position: the first explicit name wins, types are joined with
    ``" | "`` in first-seen order, and a position missing from some overload gets
    a trailing ``?``.
    """
    if isinstance(type_info, ReferenceType) and not type_info.arguments and type_info.name in type_lookup:
        type_info = type_lookup[type_info.name]

    overloads = _collect_overloads(type_info)
    if not overloads:
        return None

    merged: List[_MergedArgument] = []
    for overload in overloads:
        for index, argument in enumerate(overload.arguments):
            name = _argument_name(argument)
            if index == len(merged):
                merged.append(_MergedArgument(name))
            slot = merged[index]
            if slot.name == "_" and name != "_":
                slot.name = name
            typ = _argument_type(argument)
            if typ not in slot.types:
                slot.types.append(typ)
            slot.seen += 1

    arguments = []
    for slot in merged:
        typ = " | ".join(slot.types)
        if slot.seen < len(overloads) and not typ.endswith("?"):
            typ = f"({typ})?" if len(slot.types) > 1 else f"{typ}?"
        arguments.append(DeclarationArgument(slot.name, typ))
    return arguments
