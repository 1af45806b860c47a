import pytest

from definitions_item import DeclarationArgument, DeclarationKind
from type_info import (
    FunctionArgument,
    FunctionType,
    GenericPackType,
    IntersectionType,
    OptionalType,
    ReferenceType,
    StringLiteralType,
    TableField,
    TableType,
    TypeofType,
    TypePack,
    UnionType,
    VariadicType,
)
from type_info_ext import classify_kind, normalize_arguments

STRING = ReferenceType('string')
NUMBER = ReferenceType('number')
BOOLEAN = ReferenceType('boolean')
NIL = ReferenceType('nil')


def fn(*arguments, returns=TypePack()):
    return FunctionType(tuple(arguments), returns)


@pytest.mark.parametrize("type_info, expected", [
    (TableType((TableField(NUMBER, key='x'),)), DeclarationKind.TABLE),
    (TableType(array_element=STRING), DeclarationKind.TABLE),
    (fn(), DeclarationKind.FUNCTION),
    (STRING, DeclarationKind.PROPERTY),
    (StringLiteralType('"linux"'), DeclarationKind.PROPERTY),
    (TypeofType('typeof(x)'), DeclarationKind.PROPERTY),
    (OptionalType(TableType()), DeclarationKind.TABLE),
    (OptionalType(fn()), DeclarationKind.FUNCTION),
    (UnionType((StringLiteralType('"a"'), StringLiteralType('"b"'))), DeclarationKind.PROPERTY),
    (IntersectionType((fn(), fn())), DeclarationKind.FUNCTION),
    (UnionType((STRING, fn())), DeclarationKind.OTHER),
    (TypePack((STRING, NUMBER)), DeclarationKind.OTHER),
])
def test_classify_kind(type_info, expected):
    assert classify_kind(type_info) == expected


def test_non_callable_types_have_no_arguments():
    assert normalize_arguments(STRING, {}) is None
    assert normalize_arguments(TableType(), {}) is None
    assert normalize_arguments(UnionType((STRING, fn())), {}) is None


def test_function_without_arguments_has_empty_list():
    assert normalize_arguments(fn(), {}) == []


def test_named_unnamed_and_variadic_arguments():
    function = fn(
        FunctionArgument(STRING, 'path'),
        FunctionArgument(NUMBER),
        FunctionArgument(VariadicType(BOOLEAN)),
    )
    assert normalize_arguments(function, {}) == [
        DeclarationArgument('path', 'string'),
        DeclarationArgument('_', 'number'),
        DeclarationArgument('...', 'boolean'),
    ]


def test_generic_pack_argument_keeps_pack_form():
    function = fn(FunctionArgument(GenericPackType('T')))
    assert normalize_arguments(function, {}) == [DeclarationArgument('...', 'T...')]


def test_overloads_are_merged_by_position():
    overloaded = IntersectionType((
        fn(FunctionArgument(NUMBER, 'x')),
        fn(FunctionArgument(STRING), FunctionArgument(BOOLEAN, 'flag')),
    ))
    assert normalize_arguments(overloaded, {}) == [
        DeclarationArgument('x', 'number | string'),
        DeclarationArgument('flag', 'boolean?'),
    ]


def test_optional_position_with_several_types_is_parenthesized():
    overloaded = IntersectionType((
        fn(),
        fn(FunctionArgument(STRING, 'value')),
        fn(FunctionArgument(NUMBER, 'value')),
    ))
    assert normalize_arguments(overloaded, {}) == [DeclarationArgument('value', '(string | number)?')]


def test_optional_callback_and_nil_union():
    callback = fn(FunctionArgument(STRING, 'message'))
    expected = [DeclarationArgument('message', 'string')]
    assert normalize_arguments(OptionalType(callback), {}) == expected
    assert normalize_arguments(UnionType((callback, NIL)), {}) == expected


def test_reference_is_resolved_once_through_lookup():
    callback = fn(FunctionArgument(STRING, 'value'))
    lookup = {'Callback': callback, 'Alias': ReferenceType('Callback')}
    assert normalize_arguments(ReferenceType('Callback'), lookup) == [DeclarationArgument('value', 'string')]
    # Only one hop: Alias -> Callback is not followed further
    assert normalize_arguments(ReferenceType('Alias'), lookup) is None
    assert normalize_arguments(ReferenceType('Unknown'), lookup) is None


def test_generic_reference_is_not_resolved():
    lookup = {'Callback': fn(FunctionArgument(STRING, 'value'))}
    assert normalize_arguments(ReferenceType('Callback', (STRING,)), lookup) is None
