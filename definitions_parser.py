"""
definitions_parser.py
Turns Luau type definition source into documentation-ready DeclarationItems.

Parsing happens in two phases. ``DefinitionsParser.parse`` rewrites ambient
``declare`` syntax, parses the text and scans the top-level type declarations into
a registry. ``DefinitionsParser.drain`` builds one item per registry entry (sorted
by name), recursing into table fields, and then empties the parser.
"""
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from lark import Tree

from declare_normalizer import normalize_declare_syntax
from definitions_errors import ParseError
from definitions_item import DeclarationItem, DeclarationItemBuilder, DeclarationKind
from luau_lark_parser import parse_definitions_source
from luau_trivia import SourceTrivia, scan_trivia
from moonwave import parse_documentation
from parser_options import ParserOptions
from type_info import TableType, TypeInfo
from type_info_ext import classify_kind, normalize_arguments

logger = logging.getLogger(__name__)


class RawDeclaration:
    """A declared name, its doc comment body (if any) and its type expression."""

    def __init__(self, name: str, comment: Optional[str], type_info: TypeInfo):
        self.name = name
        self.comment = comment
        self.type_info = type_info

    def __repr__(self):
        return f"RawDeclaration(name={self.name!r}, type={self.type_info.render()!r})"


def scan_statements(tree: Tree, trivia: SourceTrivia) -> Dict[str, RawDeclaration]:
    """
    Collect every top-level type declaration into a registry keyed by name.

    The doc comment is taken from the statement's leading keyword (``export`` or
    ``type``). A later declaration of the same name replaces the earlier one.
    """
    registry: Dict[str, RawDeclaration] = {}
    for statement in tree.children:
        if not isinstance(statement, Tree):
            continue
        if statement.data == "exported_type_declaration":
            leading_token, declaration = statement.children[0], statement.children[1]
        elif statement.data == "type_declaration":
            leading_token, declaration = statement.children[0], statement
        else:
            continue
        name = str(declaration.children[1])
        comment = trivia.find_doc_comment(leading_token)
        registry[name] = RawDeclaration(name, comment, declaration.children[-1])
    return registry


class BuildContext:
    """Read-only state shared by every recursive build step of one drain."""

    def __init__(self, registry: Mapping[str, RawDeclaration], exported_names: Sequence[str], trivia: SourceTrivia):
        self.registry = MappingProxyType(dict(registry))
        self.exported_names = frozenset(exported_names)
        self.trivia = trivia
        self.type_lookup = {name: declaration.type_info for name, declaration in registry.items()}


def build_declaration_item(declaration: RawDeclaration, context: BuildContext,
                           kind: Optional[DeclarationKind] = None) -> DeclarationItem:
    """Build the item for ``declaration``, recursing into the named fields of table types."""
    type_info = declaration.type_info
    builder = (
        DeclarationItemBuilder()
        .with_kind(kind if kind is not None else classify_kind(type_info))
        .with_name(declaration.name)
        .with_type(type_info.render())
    )
    if declaration.name in context.exported_names:
        builder.as_exported()
    if declaration.comment is not None:
        builder.with_documentation(parse_documentation(declaration.comment))
    args = normalize_arguments(type_info, context.type_lookup)
    if args is not None:
        builder.with_args(args)
    if isinstance(type_info, TableType):
        for field in type_info.fields:
            if not field.has_name_key:
                logger.debug("Skipping computed key field [%s] in '%s'", field.computed_key, declaration.name)
                continue
            child = RawDeclaration(field.key, context.trivia.find_doc_comment(field.key_token), field.value)
            builder.with_child(build_declaration_item(child, context))
    return builder.build()


class DefinitionsParser:
    """
    Parses Luau type definitions into DeclarationItems.

    Each successful ``parse`` replaces whatever an earlier ``parse`` collected;
    ``drain`` returns the items and resets the parser. Not safe for concurrent use.
    """

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options or ParserOptions()
        if self.options.verbose:
            for name in (__name__, "declare_normalizer"):
                logging.getLogger(name).setLevel(logging.DEBUG)
        self._registry: Dict[str, RawDeclaration] = {}
        self._exported_names: tuple = ()
        self._trivia: Optional[SourceTrivia] = None

    @property
    def declared_names(self) -> List[str]:
        return sorted(self._registry)

    @property
    def exported_names(self) -> List[str]:
        return list(self._exported_names)

    @property
    def is_empty(self) -> bool:
        return not self._registry

    def parse(self, contents: str) -> None:
        """
        Parse ``contents`` and keep its top-level declarations for ``drain``.

        Raises ParseError on invalid input; the previously parsed state is then kept.
        """
        if len(contents) > self.options.max_source_length:
            raise ParseError(
                f"Type definitions are too large ({len(contents)} characters, "
                f"limit is {self.options.max_source_length})"
            )
        normalized = normalize_declare_syntax(contents)
        trivia = scan_trivia(normalized.text)
        depth = trivia.max_nesting_depth()
        if depth > self.options.max_nesting_depth:
            raise ParseError(
                f"Type definitions are nested too deeply (depth {depth}, "
                f"limit is {self.options.max_nesting_depth})"
            )
        tree = parse_definitions_source(trivia.masked_text)
        registry = scan_statements(tree, trivia)
        logger.debug("Parsed %d top-level declarations (%d declared globals)",
                     len(registry), len(normalized.exported_names))

        self._registry = registry
        self._exported_names = normalized.exported_names
        self._trivia = trivia

    def drain(self) -> List[DeclarationItem]:
        """
        Convert the parsed declarations into items, sorted by name, and reset the parser.

        The parser is emptied even when building an item fails; the BuildError
        propagates and no partial list is returned.
        """
        try:
            if not self._registry:
                return []
            context = BuildContext(self._registry, self._exported_names, self._trivia)
            items = [
                build_declaration_item(self._registry[name], context)
                for name in sorted(self._registry)
            ]
            logger.debug("Drained %d definitions items", len(items))
            return items
        finally:
            self._registry = {}
            self._exported_names = ()
            self._trivia = None
