"""Configuration for the definitions parser."""

from dataclasses import dataclass

DEFAULT_MAX_SOURCE_LENGTH = 4 * 1024 * 1024
DEFAULT_MAX_NESTING_DEPTH = 64


@dataclass(frozen=True)
class ParserOptions:
    """Input limits and diagnostics switches for ``DefinitionsParser``."""

    # Maximum number of characters accepted by a single parse call
    max_source_length: int = DEFAULT_MAX_SOURCE_LENGTH
    # Maximum bracket nesting ({, (, <, [) accepted in type expressions
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    # Raise the parser loggers to DEBUG
    verbose: bool = False

    def __post_init__(self):
        if self.max_source_length <= 0:
            raise ValueError("max_source_length must be positive")
        if self.max_nesting_depth <= 0:
            raise ValueError("max_nesting_depth must be positive")
