
import sys
import os
from tempfile import TemporaryDirectory
import pytest
# Ensure the project root is on sys.path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from definitions_parser import DefinitionsParser


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with TemporaryDirectory() as dir_path:
        yield dir_path


@pytest.fixture
def parse_and_drain():
    """Parse a definitions source with a fresh parser and return the drained items."""
    def _parse_and_drain(text, options=None):
        parser = DefinitionsParser(options)
        parser.parse(text)
        return parser.drain()
    return _parse_and_drain
