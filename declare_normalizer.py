# declare_normalizer.py
# Rewrites ambient "declare" statements into syntax the definitions grammar understands.
#
#   declare class Foo ... end   -> removed
#   declare foo: T              -> export type foo = T   (and "foo" is recorded as exported)

import logging
import re
from typing import List, Tuple

from definitions_errors import ParseError
from luau_trivia import scan_trivia

logger = logging.getLogger(__name__)

_DECLARE_CLASS = re.compile(r"^[ \t]*declare[ \t]+class\b", re.MULTILINE)
_BLOCK_END = re.compile(r"^[ \t]*end\b", re.MULTILINE)
_DECLARE_HEADER = re.compile(r"\bdeclare[ \t]+([A-Za-z_][A-Za-z0-9_]*)[ \t]*:[ \t]*")


class NormalizedSource:
    """Source text after declare rewriting, and the names declared with ``declare``, in order."""

    def __init__(self, text: str, exported_names: List[str]):
        self.text = text
        self.exported_names: Tuple[str, ...] = tuple(exported_names)


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _first_unmasked(pattern, text, trivia, pos=0):
    for match in pattern.finditer(text, pos):
        if not trivia.is_masked(match.end() - 1):
            return match
    return None


def remove_declare_class_blocks(text: str) -> str:
    """
    Delete every ``declare class ... end`` block.

    Blocks are assumed not to nest: each one ends at the next line starting with
    ``end``. Markers inside comments and strings are ignored. A block without a
    terminating ``end`` raises ParseError. Comments leading a block are removed
    with it.
    """
    while True:
        trivia = scan_trivia(text)
        start = _first_unmasked(_DECLARE_CLASS, text, trivia)
        if start is None:
            return text
        end = _first_unmasked(_BLOCK_END, text, trivia, start.end())
        if end is None:
            line = trivia.line_of(start.start())
            raise ParseError("Missing 'end' for 'declare class' block", line=line)
        # Comments leading the block go with it
        leading = trivia.leading_comments(start.start())
        cut = leading[-1].start if leading else start.start()
        logger.debug("Removing declare class block on lines %d-%d",
                     trivia.line_of(cut), trivia.line_of(end.end()))
        text = text[:cut] + text[end.end():]


def normalize_declare_syntax(contents: str) -> NormalizedSource:
    """Apply line ending normalization, class block removal and declare rewriting to ``contents``."""
    text = remove_declare_class_blocks(normalize_line_endings(contents))
    trivia = scan_trivia(text)
    exported_names = []

    def rewrite(match):
        if trivia.is_masked(match.start()):
            return match.group(0)
        exported_names.append(match.group(1))
        return f"export type {match.group(1)} = "

    rewritten = _DECLARE_HEADER.sub(rewrite, text)
    if exported_names:
        logger.debug("Found declared globals: %s", ", ".join(exported_names))
    return NormalizedSource(rewritten, exported_names)
