import re

from lark import Lark
from lark.exceptions import LarkError, UnexpectedEOF, UnexpectedInput

from definitions_errors import ParseError
from luau_trivia import scan_trivia
from type_info import TypeInfoBuilder, typeof_expression_end


# Grammar for Luau type definition files. Comments never reach this grammar:
# luau_trivia blanks them out beforehand, so only whitespace is ignored here.
grammar = r"""
    start: _statement*

    _statement: type_declaration
              | exported_type_declaration
              | ";"

    exported_type_declaration: EXPORT type_declaration
    type_declaration: TYPE NAME generic_declaration? "=" type

    generic_declaration: "<" generic_parameter ("," generic_parameter)* ">"
    generic_parameter: NAME ELLIPSIS? ("=" _type_or_pack)?

    _type_or_pack: type | type_pack | variadic_type | generic_pack

    ?type: union_type
         | function_type

    ?union_type: "|"? intersection_type ("|" intersection_type)*
    ?intersection_type: "&"? optional_type ("&" optional_type)*
    ?optional_type: simple_type
                  | optional
    optional: simple_type "?"+

    ?simple_type: reference
                | string_literal
                | typeof_type
                | table_type
                | "(" type ")"

    reference: NAME ("." NAME)? type_arguments?
    type_arguments: "<" _type_or_pack ("," _type_or_pack)* ">"
    string_literal: STRING

    typeof_type: TYPEOF "(" ")"

    table_type: "{" _table_body? "}"
    _table_body: array_element
               | _table_field (_field_separator _table_field)* _field_separator?
    array_element: type
    _table_field: name_field | indexer_field
    name_field: _field_key ":" type
    indexer_field: "[" type "]" ":" type
    _field_key: NAME | TYPE | EXPORT | TYPEOF
    _field_separator: "," | ";"

    function_type: generic_declaration? "(" function_parameters? ")" "->" _return_type
    function_parameters: _function_parameter ("," _function_parameter)*
    _function_parameter: named_parameter
                       | positional_parameter
                       | variadic_type
                       | generic_pack
    named_parameter: _field_key ":" type
    positional_parameter: type

    _return_type: type | type_pack | variadic_type | generic_pack
    type_pack: "(" (_type_or_pack ("," _type_or_pack)*)? ")"
    variadic_type: ELLIPSIS type
    generic_pack: NAME ELLIPSIS

    EXPORT: "export"
    TYPE: "type"
    TYPEOF: "typeof"
    ELLIPSIS: "..."
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    STRING: /"(\\.|[^"\\\n])*"|'(\\.|[^'\\\n])*'/
    %import common.WS
    %ignore WS
"""

parser = Lark(
    grammar,
    start='start',
    parser='earley',
    lexer='basic',
    ambiguity='resolve',
    propagate_positions=True
)


_TYPEOF_OPEN = re.compile(r"\btypeof\s*\(")


def blank_typeof_expressions(text):
    """
    Blank the expression inside every ``typeof(...)`` so the grammar only sees ``typeof( )``.

    The expression is arbitrary Luau, kept as opaque text: TypeInfoBuilder reads
    it back from the unblanked source. Newlines are kept so positions stay valid.
    """
    if "typeof" not in text:
        return text
    trivia = scan_trivia(text)
    chars = list(text)
    pos = 0
    while True:
        match = _TYPEOF_OPEN.search(text, pos)
        if match is None:
            break
        pos = match.end()
        if trivia.is_masked(match.start()):
            continue
        close = typeof_expression_end(text, match.end() - 1)
        if close < 0:
            # Unbalanced; left for the grammar to reject
            break
        for i in range(match.end(), close):
            if chars[i] != "\n":
                chars[i] = " "
        pos = close + 1
    return "".join(chars)


def _end_of_input(text):
    line = text.count("\n") + 1
    column = len(text) - (text.rfind("\n") + 1) + 1
    return line, column


def parse_definitions_source(text):
    """
    Parse comment-masked Luau definitions text into a statement tree.

    Type subtrees are transformed into ``type_info`` objects; statements stay Lark
    trees whose first children are the ``export``/``type`` keyword and name tokens.
    Raises ParseError when the grammar rejects the text or the tree is too deep
    to transform. A truncated source reports the end of the text as its location.
    """
    try:
        tree = parser.parse(blank_typeof_expressions(text))
        return TypeInfoBuilder(text).transform(tree)
    except UnexpectedInput as e:
        line, column = getattr(e, "line", -1), getattr(e, "column", -1)
        if isinstance(e, UnexpectedEOF) or line is None or line < 0:
            line, column = _end_of_input(text)
        raise ParseError(f"Failed to parse type definitions: {e}", line=line, column=column) from e
    except LarkError as e:
        raise ParseError(f"Failed to parse type definitions: {e}") from e
    except RecursionError as e:
        raise ParseError("Type definitions are nested too deeply") from e
