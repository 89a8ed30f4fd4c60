"""
Card Command Parser
===================
Parses the argument part of an `/add` command:

    payload  := name [ '#' tags ] [ '@' folders ]
    name     := any characters except '#' and '@' (at least one)
    tags     := any characters except '@'
    folders  := any characters to end of input

Tags and folders are comma separated; every piece is trimmed and empty
pieces are dropped. Matching is case-sensitive and duplicates are kept.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

TAG_MARKER = "#"
FOLDER_MARKER = "@"
LIST_SEPARATOR = ","


class CommandSyntaxError(ValueError):
    """The text does not follow the `/add` grammar."""


class EmptyNameError(CommandSyntaxError):
    """The name segment is blank."""


@dataclass
class AddArguments:
    name: str
    tags: List[str] = field(default_factory=list)
    folders: List[str] = field(default_factory=list)


def split_list(segment: str) -> List[str]:
    return [piece.strip() for piece in segment.split(LIST_SEPARATOR) if piece.strip()]


class _AddParser:
    """Single-pass recursive descent over the three segments."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _take_until(self, stops: str) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in stops:
            self.pos += 1
        return self.text[start:self.pos]

    def parse(self) -> AddArguments:
        name = self._name()
        tags: List[str] = []
        folders: List[str] = []

        if self._peek() == TAG_MARKER:
            self.pos += 1
            tags = self._tags()
        if self._peek() == FOLDER_MARKER:
            self.pos += 1
            folders = self._folders()

        return AddArguments(name=name, tags=tags, folders=folders)

    def _name(self) -> str:
        raw = self._take_until(TAG_MARKER + FOLDER_MARKER)
        if not raw:
            raise CommandSyntaxError(f"Missing card name before '{self._peek()}'.")
        name = raw.strip()
        if not name:
            raise EmptyNameError("Card name is blank.")
        return name

    def _tags(self) -> List[str]:
        return split_list(self._take_until(FOLDER_MARKER))

    def _folders(self) -> List[str]:
        segment = self.text[self.pos:]
        self.pos = len(self.text)
        return split_list(segment)


def parse_add_arguments(text: str) -> AddArguments:
    """
    Parse `name #tag1,tag2 @folder1,folder2`.

    Raises:
        EmptyNameError: the payload is empty or the name is only whitespace.
        CommandSyntaxError: the payload starts with a tag or folder marker.
    """
    payload = text.strip()
    if not payload:
        raise EmptyNameError("Card name is blank.")
    return _AddParser(payload).parse()
