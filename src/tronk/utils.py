from typing import Iterable

from tronk.config import CARD_NAME_MAX_CHARS


def truncate_name(name: str, limit: int = CARD_NAME_MAX_CHARS) -> str:
    """Shorten a card name for the grid tile, appending '...' when cut."""
    if len(name) > limit:
        return name[:limit] + "..."
    return name

def format_tags(tags: Iterable[str]) -> str:
    """Render tags as '#a #b'."""
    return " ".join(f"#{tag}" for tag in tags)
