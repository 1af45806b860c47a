"""
definitions_item.py
Documentation-ready representation of declarations found in Luau type definitions,
and the builder that assembles and validates them.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from definitions_errors import BuildError
from moonwave import StructuredDoc


class DeclarationKind(Enum):
    FUNCTION = "function"
    TABLE = "table"
    PROPERTY = "property"
    OTHER = "other"


class DeclarationArgument:
    """One normalized function argument: a display name and its rendered type."""

    def __init__(self, name: str, typ: str):
        self.name = name
        self.typ = typ

    def to_dict(self):
        return {"name": self.name, "type": self.typ}

    def __eq__(self, other):
        return isinstance(other, DeclarationArgument) and (self.name, self.typ) == (other.name, other.typ)

    def __repr__(self):
        return f"DeclarationArgument(name={self.name!r}, typ={self.typ!r})"


class DeclarationItem:
    """
    A single declared symbol (top-level type, or a field nested inside a table type).

    Items are created by DeclarationItemBuilder and never change afterwards.
    """

    def __init__(
        self,
        kind: DeclarationKind,
        name: str,
        typ: Optional[str],
        exported: bool,
        documentation: Optional[StructuredDoc],
        children: Iterable['DeclarationItem'],
        args: Optional[Iterable[DeclarationArgument]],
    ):
        self._kind = kind
        self._name = name
        self._typ = typ
        self._exported = exported
        self._documentation = documentation
        self._children = tuple(children)
        self._args = tuple(args) if args is not None else None

    @property
    def kind(self) -> DeclarationKind:
        return self._kind

    @property
    def name(self) -> str:
        return self._name

    @property
    def typ(self) -> Optional[str]:
        """Canonical Luau type signature."""
        return self._typ

    @property
    def exported(self) -> bool:
        return self._exported

    @property
    def documentation(self) -> Optional[StructuredDoc]:
        return self._documentation

    @property
    def children(self):
        return self._children

    @property
    def args(self):
        """Normalized arguments, or None when the declaration is not callable."""
        return self._args

    def is_function(self) -> bool:
        return self._kind == DeclarationKind.FUNCTION

    def is_table(self) -> bool:
        return self._kind == DeclarationKind.TABLE

    def is_property(self) -> bool:
        return self._kind == DeclarationKind.PROPERTY

    def get_child(self, name: str) -> Optional['DeclarationItem']:
        for child in self._children:
            if child.name == name:
                return child
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "kind": self._kind.value,
            "name": self._name,
            "type": self._typ,
            "exported": self._exported,
        }
        if self._documentation is not None:
            data["documentation"] = self._documentation.to_dict()
        if self._args is not None:
            data["args"] = [arg.to_dict() for arg in self._args]
        if self._children:
            data["children"] = [child.to_dict() for child in self._children]
        return data

    def __repr__(self):
        return f"DeclarationItem(kind={self._kind.value!r}, name={self._name!r}, typ={self._typ!r})"


class DeclarationItemBuilder:
    """Fluent builder for DeclarationItem; ``build`` validates the collected parts."""

    def __init__(self):
        self._kind: Optional[DeclarationKind] = None
        self._name: Optional[str] = None
        self._typ: Optional[str] = None
        self._exported = False
        self._documentation: Optional[StructuredDoc] = None
        self._children: List[DeclarationItem] = []
        self._args: Optional[List[DeclarationArgument]] = None

    def with_kind(self, kind: DeclarationKind) -> 'DeclarationItemBuilder':
        self._kind = kind
        return self

    def with_name(self, name: str) -> 'DeclarationItemBuilder':
        self._name = name
        return self

    def with_type(self, typ: str) -> 'DeclarationItemBuilder':
        self._typ = typ
        return self

    def as_exported(self) -> 'DeclarationItemBuilder':
        self._exported = True
        return self

    def with_documentation(self, documentation: StructuredDoc) -> 'DeclarationItemBuilder':
        self._documentation = documentation
        return self

    def with_child(self, child: DeclarationItem) -> 'DeclarationItemBuilder':
        self._children.append(child)
        return self

    def with_children(self, children: Iterable[DeclarationItem]) -> 'DeclarationItemBuilder':
        self._children.extend(children)
        return self

    def with_args(self, args: Iterable[DeclarationArgument]) -> 'DeclarationItemBuilder':
        self._args = list(args)
        return self

    def build(self) -> DeclarationItem:
        if self._kind is None:
            raise BuildError(f"Missing kind for definitions item '{self._name}'")
        if not isinstance(self._kind, DeclarationKind):
            raise BuildError(f"Invalid kind {self._kind!r} for definitions item '{self._name}'")
        if not self._name:
            raise BuildError("Missing name for definitions item")
        return DeclarationItem(
            self._kind,
            self._name,
            self._typ,
            self._exported,
            self._documentation,
            self._children,
            self._args,
        )
