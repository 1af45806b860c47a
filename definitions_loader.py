# definitions_loader.py
# Reads Luau type definition files from disk and serializes the resulting items as JSON.
import json
import logging
from typing import Iterable, List, Optional

from definitions_item import DeclarationItem
from definitions_parser import DefinitionsParser
from parser_options import ParserOptions

logger = logging.getLogger(__name__)


def load_definitions_file(definitions_file_path: str, options: Optional[ParserOptions] = None) -> List[DeclarationItem]:
    """Parse one definitions file with a fresh parser and return its drained items."""
    with open(definitions_file_path, 'r', encoding='utf-8') as f:
        text = f.read()
    logger.debug("Loading type definitions from %s", definitions_file_path)
    parser = DefinitionsParser(options)
    parser.parse(text)
    return parser.drain()


def items_to_json(items: Iterable[DeclarationItem], indent: Optional[int] = 4) -> str:
    return json.dumps([item.to_dict() for item in items], indent=indent)


def write_items_json(items: Iterable[DeclarationItem], output_path: str, indent: Optional[int] = 4) -> None:
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(items_to_json(items, indent))
        f.write("\n")
