"""
definitions_errors.py
Exceptions raised while parsing Luau type definitions and building definition items.
"""
from typing import Optional


class DefinitionsError(Exception):
    """Base class for every error raised by the definitions parser."""
    pass


class ParseError(DefinitionsError):
    """
    The source text could not be turned into a registry of declarations.

    Raised when the grammar rejects the (rewritten) source, when an ambient
    ``declare class`` block has no terminating ``end``, or when the input is
    larger or deeper than the configured limits.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        if line is not None:
            location = f"line {line}" if column is None else f"line {line}, column {column}"
            super().__init__(f"{message} ({location})")
        else:
            super().__init__(message)


class BuildError(DefinitionsError):
    """A definition item failed validation while being built."""
    pass
