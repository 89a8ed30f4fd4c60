"""
Grid Layout
Viewport-derived sizes for the card grid and the input station.
Recomputed on every resize, never persisted.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from tronk.config import (
    CARD_WIDTH, CARD_HEIGHT, CARD_SPACING, GRID_MARGIN,
    INPUT_STATION_WIDTH, INPUT_STATION_RIGHT_MARGIN,
    INPUT_STATION_INPUT_HEIGHT, INPUT_STATION_OUTPUT_HEIGHT,
)


def column_count(available_width: float,
                 card_width: float = CARD_WIDTH,
                 spacing: float = CARD_SPACING) -> int:
    """Number of cards that fit on one grid row (never less than 1)."""
    if card_width + spacing <= 0:
        raise ValueError("Card width plus spacing must be positive.")
    return max(1, math.floor(available_width / (card_width + spacing)))


@dataclass(frozen=True)
class Layout:
    full_width: float
    full_height: float
    input_station_height: float
    input_station_width: float = INPUT_STATION_WIDTH
    input_station_right_margin: float = INPUT_STATION_RIGHT_MARGIN
    input_station_input_height: float = INPUT_STATION_INPUT_HEIGHT
    input_station_output_height: float = INPUT_STATION_OUTPUT_HEIGHT
    card_width: float = CARD_WIDTH
    card_height: float = CARD_HEIGHT
    card_spacing: float = CARD_SPACING
    margin: float = GRID_MARGIN

    @classmethod
    def from_viewport(cls, width: float, height: float) -> Layout:
        return cls(
            full_width=width,
            full_height=height,
            input_station_height=height / 3.0,
        )

    @property
    def grid_width(self) -> float:
        return max(0.0, self.full_width - 2 * self.margin)

    @property
    def columns(self) -> int:
        return column_count(self.grid_width, self.card_width, self.card_spacing)

    def input_station_origin(self) -> tuple[float, float]:
        """Top-left corner that docks the input station to the bottom right."""
        x = self.full_width - self.input_station_width - self.input_station_right_margin
        y = self.full_height - self.input_station_height
        return max(0.0, x), max(0.0, y)
