# luau_trivia.py
# Comment and string scanning for Luau source text.
#
# The grammar in luau_lark_parser only sees significant tokens. Comments are
# found here first, blanked out of the text handed to the grammar (keeping every
# offset and line number intact), and kept aside so that the leading trivia of
# any parsed token can be inspected afterwards.

import bisect
from typing import List, Optional, Tuple

from definitions_errors import ParseError

# Long-bracket level of a Moonwave doc comment: --[=[ ... ]=]
DOC_COMMENT_LEVEL = 1

_OPENERS = "{(<["
_CLOSERS = "})>]"


class Comment:
    """
    A single comment in the source.

    ``level`` is None for a line comment (``-- ...``) and the number of ``=``
    signs in the brackets for a long comment (``--[==[ ... ]==]`` has level 2).
    ``body`` is the text between the delimiters.
    """

    def __init__(self, start: int, end: int, line: int, level: Optional[int], body: str):
        self.start = start
        self.end = end
        self.line = line
        self.level = level
        self.body = body

    @property
    def is_doc_comment(self) -> bool:
        return self.level == DOC_COMMENT_LEVEL

    def __repr__(self):
        return f"Comment(line={self.line}, level={self.level!r}, body={self.body!r})"


class SourceTrivia:
    """Comments and string literal spans found in one source text."""

    def __init__(self, text: str, comments: List[Comment], strings: List[Tuple[int, int]]):
        self.text = text
        self.comments = comments
        self.strings = strings
        self._comment_ends = [c.end for c in comments]
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]
        spans = sorted([(c.start, c.end) for c in comments] + list(strings))
        self._masked_starts = [s for s, _ in spans]
        self._masked_spans = spans
        self._masked_text = None

    @property
    def masked_text(self) -> str:
        """The source with every comment replaced by spaces, newlines preserved."""
        if self._masked_text is None:
            chars = list(self.text)
            for comment in self.comments:
                for i in range(comment.start, comment.end):
                    if chars[i] != "\n":
                        chars[i] = " "
            self._masked_text = "".join(chars)
        return self._masked_text

    def line_of(self, pos: int) -> int:
        """1-based line number of a character offset."""
        return bisect.bisect_right(self._line_starts, pos)

    def is_masked(self, pos: int) -> bool:
        """True when ``pos`` falls inside a comment or a string literal."""
        idx = bisect.bisect_right(self._masked_starts, pos) - 1
        if idx < 0:
            return False
        start, end = self._masked_spans[idx]
        return start <= pos < end

    def leading_comments(self, pos: int) -> List[Comment]:
        """
        Comments in the leading trivia of the token starting at ``pos``, closest first.

        The leading trivia is the unbroken run of whitespace and comments right
        before the token. Comments starting on the line where the previous
        significant token ends are that token's trailing trivia and are left out.
        """
        text = self.text
        found = []
        cursor = pos
        idx = bisect.bisect_right(self._comment_ends, cursor) - 1
        while True:
            while cursor > 0 and text[cursor - 1].isspace():
                cursor -= 1
            if idx >= 0 and self.comments[idx].end == cursor:
                found.append(self.comments[idx])
                cursor = self.comments[idx].start
                idx -= 1
            else:
                break
        if cursor > 0:
            previous_line = self.line_of(cursor - 1)
            found = [c for c in found if c.line != previous_line]
        return found

    def find_doc_comment(self, token) -> Optional[str]:
        """Body of the nearest doc comment preceding ``token``, if any."""
        for comment in self.leading_comments(token.start_pos):
            if comment.is_doc_comment:
                return comment.body
        return None

    def max_nesting_depth(self) -> int:
        """Deepest bracket nesting outside comments and strings (``->`` is not a bracket)."""
        text = self.masked_text
        depth = deepest = 0
        for i, ch in enumerate(text):
            if ch in _OPENERS:
                if self.is_masked(i):
                    continue
                depth += 1
                deepest = max(deepest, depth)
            elif ch in _CLOSERS:
                if ch == ">" and i > 0 and text[i - 1] == "-":
                    continue
                if self.is_masked(i):
                    continue
                depth = max(depth - 1, 0)
        return deepest


def _long_bracket_level(text: str, pos: int) -> Optional[int]:
    """Level of a long bracket opening at ``pos`` (``[==[`` is 2), or None."""
    if pos >= len(text) or text[pos] != "[":
        return None
    i = pos + 1
    while i < len(text) and text[i] == "=":
        i += 1
    if i < len(text) and text[i] == "[":
        return i - pos - 1
    return None


def scan_trivia(text: str) -> SourceTrivia:
    """Find every comment and string literal in ``text``."""
    comments = []
    strings = []
    line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "-" and text.startswith("--", i):
            start = i
            line = bisect.bisect_right(line_starts, start)
            level = _long_bracket_level(text, i + 2)
            if level is not None:
                body_start = i + 2 + level + 2
                closer = "]" + "=" * level + "]"
                close = text.find(closer, body_start)
                if close < 0:
                    column = start - line_starts[line - 1] + 1
                    raise ParseError("Unfinished long comment", line=line, column=column)
                end = close + len(closer)
                comments.append(Comment(start, end, line, level, text[body_start:close]))
            else:
                end = text.find("\n", i)
                if end < 0:
                    end = n
                comments.append(Comment(start, end, line, None, text[i + 2:end]))
            i = end
        elif ch in "\"'":
            start = i
            i += 1
            while i < n and text[i] != ch and text[i] != "\n":
                i += 2 if text[i] == "\\" else 1
            if i < n and text[i] == ch:
                i += 1
            strings.append((start, min(i, n)))
        elif ch == "[" and _long_bracket_level(text, i) is not None:
            level = _long_bracket_level(text, i)
            closer = "]" + "=" * level + "]"
            close = text.find(closer, i + level + 2)
            end = n if close < 0 else close + len(closer)
            strings.append((i, end))
            i = end
        else:
            i += 1
    return SourceTrivia(text, comments, strings)
