import pytest

from definitions_errors import ParseError
from luau_trivia import scan_trivia


def test_scan_finds_line_and_long_comments():
    text = '-- line\n--[[ plain ]]\n--[=[ doc ]=]\n--[==[ deep ]==]\ntype A = string\n'
    trivia = scan_trivia(text)
    assert [c.level for c in trivia.comments] == [None, 0, 1, 2]
    assert [c.body for c in trivia.comments] == [' line', ' plain ', ' doc ', ' deep ']
    assert [c.line for c in trivia.comments] == [1, 2, 3, 4]
    assert [c.is_doc_comment for c in trivia.comments] == [False, False, True, False]


def test_masked_text_keeps_offsets_and_lines():
    text = '--[=[\n  doc\n]=]\ntype A = string -- trailing\n'
    trivia = scan_trivia(text)
    masked = trivia.masked_text
    assert len(masked) == len(text)
    assert masked.count('\n') == text.count('\n')
    assert '--' not in masked
    assert masked.index('type A = string') == text.index('type A = string')


def test_comment_markers_inside_strings_are_not_comments():
    text = 'type A = "--[=[ not a comment ]=]"\n'
    trivia = scan_trivia(text)
    assert trivia.comments == []
    assert trivia.is_masked(text.index('not'))
    assert not trivia.is_masked(text.index('type'))


def test_unfinished_long_comment_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        scan_trivia('type A = string\n--[=[ never closed\n')
    assert excinfo.value.line == 2


def test_leading_comments_closest_first():
    text = '--[=[ Far ]=]\n\n--[=[ Near ]=]\ntype A = string\n'
    trivia = scan_trivia(text)
    comments = trivia.leading_comments(text.index('type'))
    assert [c.body for c in comments] == [' Near ', ' Far ']


def test_trailing_comment_belongs_to_previous_token():
    text = 'type A = string --[=[ trailing ]=]\ntype B = number\n'
    trivia = scan_trivia(text)
    second = text.index('type B')
    assert trivia.leading_comments(second) == []


def test_leading_trivia_stops_at_code():
    text = '--[=[ Docs for A ]=]\ntype A = string\ntype B = number\n'
    trivia = scan_trivia(text)
    assert [c.body for c in trivia.leading_comments(text.index('type A'))] == [' Docs for A ']
    assert trivia.leading_comments(text.index('type B')) == []


@pytest.mark.parametrize("text, expected", [
    ('type A = string', 0),
    ('type A = { b: { c: string } }', 2),
    ('type A = (x: number) -> { y: number }', 1),
    ('type A = Map<string, { b: number }>', 2),
    ('type A = "{{{"', 0),
])
def test_max_nesting_depth(text, expected):
    assert scan_trivia(text).max_nesting_depth() == expected
