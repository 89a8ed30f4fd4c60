"""
Input/Output Manager (JSON)
Handles saving and loading the card list to a .json file.
"""
import json
import logging
import os
import tempfile
from typing import List

from tronk.model.card import Card

# Get module logger
logger = logging.getLogger(__name__)


class CardStoreError(Exception):
    """Raised when the cards file cannot be written."""


class IOManager:

    @staticmethod
    def load_cards(filepath: str) -> List[Card]:
        """
        Read the cards file. Any problem is logged and yields an empty list,
        a missing or broken file is never fatal.
        """
        logger.info(f"Loading cards from: {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError as e:
            logger.warning(f"Cards file not found, starting with an empty set: {e}")
            return []
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Error loading cards, starting with an empty set: {e}")
            return []

        if not isinstance(raw, list):
            logger.warning(f"Cards file '{filepath}' does not hold a JSON array, starting with an empty set.")
            return []

        try:
            cards = [Card.from_dict(item) for item in raw]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed card record in '{filepath}', starting with an empty set: {e}")
            return []

        logger.info(f"Loaded {len(cards)} cards.")
        return cards

    @staticmethod
    def save_cards(cards: List[Card], filepath: str) -> None:
        """
        Write the cards as pretty-printed JSON.

        The data goes to a temporary file next to the target which then
        replaces it, so a failed write leaves the previous file intact.

        Raises:
            CardStoreError: the file could not be written.
        """
        logger.info(f"Saving {len(cards)} cards to: {filepath}")
        directory = os.path.dirname(os.path.abspath(filepath))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".cards-", suffix=".json", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([card.to_dict() for card in cards], f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, filepath)
            tmp_path = None
        except OSError as e:
            logger.exception(f"Failed to save cards: {e}")
            raise CardStoreError(f"Could not save cards to '{filepath}': {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError as e:
                    logger.warning(f"Could not delete temp file '{tmp_path}': {e}")

        logger.info(f"Cards saved to: {filepath}")
