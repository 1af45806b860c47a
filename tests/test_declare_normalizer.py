import pytest

from declare_normalizer import normalize_declare_syntax, remove_declare_class_blocks
from definitions_errors import ParseError


def test_declare_header_is_rewritten_and_recorded():
    result = normalize_declare_syntax('declare foo: (x: number) -> string\ndeclare bar: number\n')
    assert result.text == 'export type foo = (x: number) -> string\nexport type bar = number\n'
    assert result.exported_names == ('foo', 'bar')


def test_line_endings_are_normalized():
    result = normalize_declare_syntax('type A = string\r\ndeclare b: A\r\n')
    assert result.text == 'type A = string\nexport type b = A\n'


def test_declare_class_block_is_removed():
    text = (
        'type A = string\n'
        'declare class Bar\n'
        '    Name: string\n'
        '    function Method(self, x: number): string\n'
        'end\n'
        'type B = number\n'
    )
    assert remove_declare_class_blocks(text) == 'type A = string\n\ntype B = number\n'


def test_several_class_blocks_are_removed():
    text = 'declare class A\n  x: number\nend\ndeclare class B extends A\nend\ntype C = string\n'
    result = normalize_declare_syntax(text)
    assert 'class' not in result.text
    assert result.text.strip() == 'type C = string'
    assert result.exported_names == ()


def test_missing_class_terminator_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        normalize_declare_syntax('type A = string\ndeclare class Broken\n    x: number\n')
    assert excinfo.value.line == 2


def test_end_inside_comment_does_not_close_class_block():
    text = 'declare class A\n--[[\nend\n]]\n    x: number\nend\ntype B = string\n'
    assert remove_declare_class_blocks(text).strip() == 'type B = string'


def test_declare_inside_comments_and_strings_is_left_alone():
    text = '--[=[ declare hidden: number ]=]\ntype A = "declare other: x"\ndeclare shown: number\n'
    result = normalize_declare_syntax(text)
    assert result.exported_names == ('shown',)
    assert '--[=[ declare hidden: number ]=]' in result.text
    assert '"declare other: x"' in result.text


def test_comments_leading_a_class_block_are_removed_with_it():
    text = 'type A = string\n--[=[ Bar doc ]=]\n-- note\ndeclare class Bar\nend\ntype Baz = number\n'
    assert remove_declare_class_blocks(text) == 'type A = string\n\ntype Baz = number\n'
