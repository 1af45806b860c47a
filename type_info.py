"""
type_info.py
Immutable representation of parsed Luau type expressions, plus the Lark transformer
that builds them from the parse tree produced by luau_lark_parser.

Every type expression renders back to a canonical Luau signature with ``str()``.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from lark import Token, Transformer


class TypeInfo:
    """Base class for every type expression."""

    def render(self) -> str:
        raise NotImplementedError("Subclasses must implement render()")

    def __str__(self):
        return self.render()


def typeof_expression_end(source: str, open_paren: int) -> int:
    """Offset of the parenthesis closing the one at ``open_paren``, or -1. Quoted strings are skipped."""
    depth = 0
    i = open_paren
    while i < len(source):
        ch = source[i]
        if ch in "\"'":
            i += 1
            while i < len(source) and source[i] != ch and source[i] != "\n":
                i += 2 if source[i] == "\\" else 1
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _wrap(type_info: TypeInfo, *wrapped_kinds) -> str:
    text = type_info.render()
    if isinstance(type_info, wrapped_kinds):
        return f"({text})"
    return text


@dataclass(frozen=True)
class ReferenceType(TypeInfo):
    """A named type such as ``string``, ``Foo.Bar`` or ``Map<K, V>``."""
    name: str
    arguments: Tuple[TypeInfo, ...] = ()

    def render(self) -> str:
        if self.arguments:
            return f"{self.name}<{', '.join(a.render() for a in self.arguments)}>"
        return self.name


@dataclass(frozen=True)
class StringLiteralType(TypeInfo):
    """A string singleton type, kept with its original quotes."""
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class TypeofType(TypeInfo):
    """``typeof(<expr>)``; the expression is opaque and kept as literal text."""
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class VariadicType(TypeInfo):
    """``...T``"""
    inner: TypeInfo

    def render(self) -> str:
        return f"...{self.inner.render()}"


@dataclass(frozen=True)
class GenericPackType(TypeInfo):
    """``T...``"""
    name: str

    def render(self) -> str:
        return f"{self.name}..."


@dataclass(frozen=True)
class TypePack(TypeInfo):
    """A parenthesized list of types, used for multiple returns: ``(string, number)``."""
    types: Tuple[TypeInfo, ...] = ()

    def render(self) -> str:
        return f"({', '.join(t.render() for t in self.types)})"


@dataclass(frozen=True)
class UnionType(TypeInfo):
    members: Tuple[TypeInfo, ...]

    def render(self) -> str:
        return " | ".join(_wrap(m, FunctionType) for m in self.members)


@dataclass(frozen=True)
class IntersectionType(TypeInfo):
    members: Tuple[TypeInfo, ...]

    def render(self) -> str:
        return " & ".join(_wrap(m, FunctionType, UnionType) for m in self.members)


@dataclass(frozen=True)
class OptionalType(TypeInfo):
    """``T?``"""
    base: TypeInfo

    def render(self) -> str:
        return _wrap(self.base, FunctionType, UnionType, IntersectionType) + "?"


@dataclass(frozen=True)
class TableField:
    """
    One field of a table type.

    ``key`` is the field name for ``name: T`` fields and None for computed
    ``[K]: T`` indexers, which carry ``computed_key`` instead. ``key_token`` is
    the source token of the field name, used to look up its doc comment.
    """
    value: TypeInfo
    key: Optional[str] = None
    computed_key: Optional[TypeInfo] = None
    key_token: Optional[Token] = field(default=None, compare=False, repr=False)

    @property
    def has_name_key(self) -> bool:
        return self.key is not None

    def render(self) -> str:
        if self.key is not None:
            return f"{self.key}: {self.value.render()}"
        return f"[{self.computed_key.render()}]: {self.value.render()}"


@dataclass(frozen=True)
class TableType(TypeInfo):
    """``{ a: T, [K]: V }`` or the array shorthand ``{ T }``."""
    fields: Tuple[TableField, ...] = ()
    array_element: Optional[TypeInfo] = None

    def render(self) -> str:
        if self.array_element is not None:
            return f"{{ {self.array_element.render()} }}"
        if not self.fields:
            return "{}"
        return f"{{ {', '.join(f.render() for f in self.fields)} }}"


@dataclass(frozen=True)
class GenericParameter:
    name: str
    is_pack: bool = False
    default: Optional[TypeInfo] = None

    def render(self) -> str:
        text = f"{self.name}..." if self.is_pack else self.name
        if self.default is not None:
            text += f" = {self.default.render()}"
        return text


@dataclass(frozen=True)
class FunctionArgument:
    """A function type argument; ``name`` is None for unnamed and variadic arguments."""
    type_info: TypeInfo
    name: Optional[str] = None

    @property
    def is_variadic(self) -> bool:
        return isinstance(self.type_info, (VariadicType, GenericPackType))

    def render(self) -> str:
        if self.name is not None:
            return f"{self.name}: {self.type_info.render()}"
        return self.type_info.render()


@dataclass(frozen=True)
class FunctionType(TypeInfo):
    """``<T>(a: T, ...number) -> R``"""
    arguments: Tuple[FunctionArgument, ...]
    returns: TypeInfo
    generics: Tuple[GenericParameter, ...] = ()

    def render(self) -> str:
        prefix = ""
        if self.generics:
            prefix = f"<{', '.join(g.render() for g in self.generics)}>"
        args = ", ".join(a.render() for a in self.arguments)
        return f"{prefix}({args}) -> {self.returns.render()}"


class TypeInfoBuilder(Transformer):
    """
    Transforms the type subtrees of a definitions parse tree into TypeInfo objects.

    Statement nodes (``type_declaration`` and friends) stay Lark trees; only their
    children are replaced, so the statement scanner still sees the keyword and
    name tokens it needs for comment lookup.
    """

    def __init__(self, source: str):
        super().__init__()
        self._source = source

    def reference(self, items):
        names = [str(i) for i in items if isinstance(i, Token)]
        arguments = next((i for i in items if isinstance(i, tuple)), ())
        return ReferenceType(".".join(names), arguments)

    def type_arguments(self, items):
        return tuple(items)

    def string_literal(self, items):
        return StringLiteralType(str(items[0]))

    def typeof_type(self, items):
        start = items[0].start_pos
        end = typeof_expression_end(self._source, self._source.index("(", start))
        return TypeofType(" ".join(self._source[start:end + 1].split()))

    def optional(self, items):
        return OptionalType(items[0])

    def union_type(self, items):
        return UnionType(tuple(items))

    def intersection_type(self, items):
        return IntersectionType(tuple(items))

    def array_element(self, items):
        return items[0]

    def name_field(self, items):
        key_token, value = items
        return TableField(value=value, key=str(key_token), key_token=key_token)

    def indexer_field(self, items):
        computed_key, value = items
        return TableField(value=value, computed_key=computed_key)

    def table_type(self, items):
        fields = tuple(i for i in items if isinstance(i, TableField))
        array_element = next((i for i in items if not isinstance(i, TableField)), None)
        return TableType(fields, array_element)

    def variadic_type(self, items):
        return VariadicType(items[-1])

    def generic_pack(self, items):
        return GenericPackType(str(items[0]))

    def type_pack(self, items):
        return TypePack(tuple(items))

    def generic_parameter(self, items):
        name = str(items[0])
        is_pack = any(isinstance(i, Token) and i.type == "ELLIPSIS" for i in items[1:])
        default = next((i for i in items[1:] if isinstance(i, TypeInfo)), None)
        return GenericParameter(name, is_pack, default)

    def generic_declaration(self, items):
        return list(items)

    def named_parameter(self, items):
        name, type_info = items
        return FunctionArgument(type_info, str(name))

    def positional_parameter(self, items):
        return FunctionArgument(items[0])

    def function_parameters(self, items):
        return [i if isinstance(i, FunctionArgument) else FunctionArgument(i) for i in items]

    def function_type(self, items):
        generics = ()
        arguments = ()
        for item in items[:-1]:
            if item and isinstance(item[0], GenericParameter):
                generics = tuple(item)
            else:
                arguments = tuple(item)
        return FunctionType(arguments, items[-1], generics)
