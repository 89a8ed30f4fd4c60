"""
Card Records
============
A card is a bookmark-like record: name, description, URL, tags and the
folders it belongs to. Identity is the UUID, assigned once at creation.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List


@dataclass(frozen=True)
class Card:
    name: str = ""
    description: str = ""
    url: str = ""
    tags: List[str] = field(default_factory=list)
    folders: List[str] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def to_dict(self) -> Dict[str, Any]:
        # asdict deep-copies the list fields; the id goes out as its canonical string
        data = asdict(self)
        data["id"] = str(self.id)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Card:
        """
        Build a card from its JSON form.

        Raises:
            KeyError: a required field is missing.
            ValueError: the id is not a UUID or a list field is not a list of strings.
        """
        tags = data.get("tags", [])
        folders = data.get("folders", [])
        for label, values in (("tags", tags), ("folders", folders)):
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise ValueError(f"Card field '{label}' must be a list of strings.")

        return Card(
            id=uuid.UUID(str(data["id"])),
            name=str(data["name"]),
            description=str(data.get("description", "")),
            url=str(data.get("url", "")),
            tags=list(tags),
            folders=list(folders),
        )
