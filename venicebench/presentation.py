"""Colours, angles and labels used to draw benchmark results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import NamedTuple

GAUGE_START_ANGLE = 45.0
GAUGE_SWEEP = 270.0


class Color(NamedTuple):
    """An RGBA colour with 8-bit channels."""

    red: int
    green: int
    blue: int
    alpha: int = 255


_CATEGORY_PALETTE = (
    Color(100, 150, 255),  # blue
    Color(255, 150, 100),  # orange
    Color(150, 255, 100),  # green
    Color(255, 100, 150),  # pink
    Color(150, 100, 255),  # purple
    Color(255, 255, 100),  # yellow
)

_GREEN = Color(0, 200, 0)
_BLUE = Color(0, 150, 200)
_YELLOW = Color(255, 200, 0)
_RED = Color(255, 100, 100)


def _channel(value: float) -> int:
    return max(0, min(255, int(value)))


def score_gradient_color(score: float) -> Color:
    """Smooth red-to-yellow-to-green colour for a 0-100 score."""
    if score < 50:
        t = score / 50.0
        return Color(255, _channel(255 * t), 0)
    t = (score - 50) / 50.0
    return Color(_channel(255 * (1 - t)), _channel(200 + _channel(55 * t)), 0)


def category_color(index: int) -> Color:
    """Colour of the index-th category; the palette repeats every six."""
    return _CATEGORY_PALETTE[index % len(_CATEGORY_PALETTE)]


def score_color(score: float) -> Color:
    """Banded colour for a score: green, blue, yellow or red."""
    if score >= 90:
        return _GREEN
    if score >= 75:
        return _BLUE
    if score >= 50:
        return _YELLOW
    return _RED


def progress_fill_color(percentage: float) -> Color:
    """Fill colour of the progress bar: red, then yellow, then green."""
    if percentage < 33:
        return _RED
    if percentage < 66:
        return _YELLOW
    return _GREEN


def gauge_angle(score: float) -> float:
    """Angle in degrees at which the gauge needle points for a 0-100 score."""
    return GAUGE_START_ANGLE + GAUGE_SWEEP * (score / 100.0)


def live_status(progress: float) -> str:
    """Status line shown in the live statistics panel."""
    if 0 < progress < 100:
        return f"Status: Testing... {progress:.0f}%"
    if progress >= 100:
        return "Status: Complete"
    return "Status: Ready"


@dataclass(frozen=True)
class PieSlice:
    """One category's slice of the pie chart."""

    category: str
    start_angle: float
    sweep: float
    share: float
    color: Color

    @property
    def label(self) -> str:
        """Percentage label drawn inside the slice."""
        return f"{self.share:.0f}%"


def pie_slices(category_scores: Mapping[str, float]) -> list[PieSlice]:
    """Lay out the categories as consecutive slices of a full circle.

    Raises ValueError when there are scores but they do not sum to a
    positive total.
    """
    if not category_scores:
        return []
    total = sum(category_scores.values())
    if total <= 0:
        raise ValueError("category scores must sum to a positive total")
    slices = []
    start = 0.0
    for index, (category, value) in enumerate(category_scores.items()):
        sweep = value / total * 360.0
        slices.append(
            PieSlice(
                category=category,
                start_angle=start,
                sweep=sweep,
                share=value / total * 100.0,
                color=category_color(index),
            )
        )
        start += sweep
    return slices