"""Mixer tracks, the engine that holds them, meters, toggles and the master mix."""

from __future__ import annotations

import math
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NamedTuple

from venicebench.presentation import Color

MAX_TRACKS = 32


class TrackLimitError(RuntimeError):
    """Raised when a track is added to an engine that already holds the maximum."""


@dataclass
class Track:
    """One mixer track: its controls and the levels last measured on it."""

    id: int
    name: str
    volume: float = 1.0
    pan: float = 0.0
    muted: bool = False
    solo: bool = False
    peak_level: float = 0.0
    rms_level: float = 0.0
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class MixerEngine:
    """The tracks being mixed, the master volume and whether playback runs."""

    tracks: list[Track] = field(default_factory=list)
    master_volume: float = 1.0
    running: bool = False
    max_tracks: int = MAX_TRACKS

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self):
        return iter(self.tracks)

    def add_track(self, track: Track) -> Track:
        """Append a track; raises TrackLimitError when the engine is full."""
        if len(self.tracks) >= self.max_tracks:
            raise TrackLimitError(
                f"Maximum number of tracks ({self.max_tracks}) has been reached"
            )
        self.tracks.append(track)
        return track

    def remove_track(self, index: int) -> Track:
        """Remove and return the track at index; raises IndexError if there is none."""
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"no track at index {index}")
        return self.tracks.pop(index)

    def track(self, index: int) -> Track:
        """The track at index; raises IndexError if there is none."""
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"no track at index {index}")
        return self.tracks[index]

    def set_solo(self, index: int, solo: bool) -> None:
        """Solo or unsolo a track; at most one track is solo at a time."""
        target = self.track(index)
        if solo:
            for other in self.tracks:
                other.solo = other is target
        else:
            target.solo = False

    def start(self) -> None:
        """Begin playback."""
        self.running = True

    def stop(self) -> None:
        """Stop playback."""
        self.running = False

    @property
    def status(self) -> str:
        """Short description of the transport state."""
        return "Playing" if self.running else "Stopped"


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass
class LevelMeter:
    """Peak and RMS levels shown on a meter, each held between 0 and 1."""

    peak_level: float = 0.0
    rms_level: float = 0.0
    last_update: float = 0.0

    def set_level(self, peak: float, rms: float) -> None:
        """Show new levels, clamped to the meter's range."""
        self.peak_level = _clamp_unit(peak)
        self.rms_level = _clamp_unit(rms)
        self.last_update = time.monotonic()


@dataclass
class ToggleButton:
    """A button that stays down until pressed again."""

    label: str
    toggled: bool = False
    normal_color: Color = Color(216, 216, 216, 255)
    pressed_color: Color = Color(255, 100, 100, 255)

    def press(self) -> bool:
        """Flip the state and return the new one."""
        self.toggled = not self.toggled
        return self.toggled

    @property
    def color(self) -> Color:
        """Background colour for the current state."""
        return self.pressed_color if self.toggled else self.normal_color


def pan_gains(pan: float) -> tuple[float, float]:
    """Left and right gains for a pan position from -1 (left) to +1 (right)."""
    return (1.0 - pan) * 0.5, (1.0 + pan) * 0.5


class MasterLevels(NamedTuple):
    """Levels of the master output for both channels."""

    peak_left: float
    peak_right: float
    rms_left: float
    rms_right: float


def mix_master_levels(
    tracks: Iterable[Track],
    master_volume: float,
    strip_count: int,
) -> MasterLevels:
    """Combine the unmuted tracks' levels into master output levels.

    Peaks take the loudest track; RMS is the root of the summed squares
    divided by the number of strips (at least one).
    """
    peak_left = peak_right = 0.0
    sum_left = sum_right = 0.0
    for track in tracks:
        if track.muted:
            continue
        left_gain, right_gain = pan_gains(track.pan)
        scale = track.volume * master_volume
        peak_left = max(peak_left, track.peak_level * scale * left_gain)
        peak_right = max(peak_right, track.peak_level * scale * right_gain)
        rms_left = track.rms_level * scale * left_gain
        rms_right = track.rms_level * scale * right_gain
        sum_left += rms_left * rms_left
        sum_right += rms_right * rms_right
    divisor = max(1, strip_count)
    return MasterLevels(
        peak_left,
        peak_right,
        math.sqrt(sum_left / divisor),
        math.sqrt(sum_right / divisor),
    )