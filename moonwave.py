# moonwave.py
# Parses the body of a Moonwave-style doc comment (--[=[ ... ]=]) into a description and tags.

import re
from typing import List, Optional

_TAG_PATTERN = re.compile(r"^@(\S+)\s*(.*)$")


class DocTag:
    """A single ``@name value`` line."""

    def __init__(self, name: str, value: str = ""):
        self.name = name
        self.value = value

    def to_dict(self):
        return {"name": self.name, "value": self.value}

    def __eq__(self, other):
        return isinstance(other, DocTag) and (self.name, self.value) == (other.name, other.value)

    def __repr__(self):
        return f"DocTag(name={self.name!r}, value={self.value!r})"


class StructuredDoc:
    """Documentation parsed from a doc comment: free-form description plus ordered tags."""

    def __init__(self, description: Optional[str] = None, tags: Optional[List[DocTag]] = None):
        self.description = description
        self.tags = tuple(tags or ())

    def get_tags(self, name: str) -> List[DocTag]:
        return [tag for tag in self.tags if tag.name == name]

    def get_tag_value(self, name: str) -> Optional[str]:
        """Value of the first tag called ``name``, or None."""
        for tag in self.tags:
            if tag.name == name:
                return tag.value
        return None

    def to_dict(self):
        return {
            "description": self.description,
            "tags": [tag.to_dict() for tag in self.tags],
        }

    def __repr__(self):
        return f"StructuredDoc(description={self.description!r}, tags={list(self.tags)!r})"


def _indentation(line: str) -> Optional[int]:
    stripped = line.lstrip()
    if not stripped:
        return None
    return len(line) - len(stripped)


def parse_documentation(comment: str) -> StructuredDoc:
    """
    Parse a doc comment body.

    Tabs count as four spaces and the indentation shared by all non-blank lines is
    removed. Lines of the form ``@name value`` become tags, in order; all other
    lines form the description, with leading and trailing blank lines dropped.
    """
    lines = comment.replace("\t", "    ").split("\n")
    indents = [i for i in (_indentation(line) for line in lines) if i is not None]
    common = min(indents) if indents else 0
    unindented = [line[common:].rstrip() for line in lines]

    tags = []
    description_lines = []
    for line in unindented:
        match = _TAG_PATTERN.match(line)
        if match:
            tags.append(DocTag(match.group(1), match.group(2).strip()))
        else:
            description_lines.append(line)

    while description_lines and not description_lines[0].strip():
        description_lines.pop(0)
    while description_lines and not description_lines[-1].strip():
        description_lines.pop()

    description = "\n".join(description_lines) if description_lines else None
    return StructuredDoc(description, tags)
