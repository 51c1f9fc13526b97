"""A mixer panel: the channel strips for a range of tracks plus the master section."""

from __future__ import annotations

from dataclasses import dataclass, field

from venicebench.tracks import (
    LevelMeter,
    MasterLevels,
    MixerEngine,
    ToggleButton,
    Track,
    TrackLimitError,
    mix_master_levels,
)
from venicebench.presentation import Color

MIN_TRACKS = 1
MAX_TRACKS_PER_PANEL = 8
TRACKS_PER_WINDOW_NUMBER = 8

VOLUME_SLIDER_RANGE = (0, 200)
PAN_SLIDER_RANGE = (-100, 100)
MASTER_SLIDER_RANGE = (0, 100)

_INITIAL_POSITIONS = (
    (-2.0, 0.0, 1.0),  # left
    (0.0, 0.0, -1.0),  # centre, back
    (2.0, 1.0, 0.0),  # right, high
    (0.0, -1.0, 0.0),  # centre, low
)

_STRIP_NORMAL = Color(200, 200, 200, 255)
_MUTE_PRESSED = Color(255, 120, 120, 255)
_SOLO_PRESSED = Color(120, 255, 120, 255)


def _slider(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, int(value)))


@dataclass
class _ChannelStrip:
    track: Track
    meter: LevelMeter = field(default_factory=LevelMeter)
    mute: ToggleButton = field(
        default_factory=lambda: ToggleButton("Mute", False, _STRIP_NORMAL, _MUTE_PRESSED)
    )
    solo: ToggleButton = field(
        default_factory=lambda: ToggleButton("Solo", False, _STRIP_NORMAL, _SOLO_PRESSED)
    )

    def __post_init__(self) -> None:
        self.mute.toggled = self.track.muted
        self.solo.toggled = self.track.solo


class MixerPanel:
    """Channel strips for the engine's tracks from start_track, at most max_tracks of them.

    The first panel on an empty engine seeds it with four demo tracks.
    """

    def __init__(
        self,
        engine: MixerEngine,
        start_track: int = 0,
        max_tracks: int = MAX_TRACKS_PER_PANEL,
    ) -> None:
        if start_track < 0:
            raise ValueError("start_track must not be negative")
        if max_tracks < MIN_TRACKS:
            raise ValueError(f"max_tracks must be at least {MIN_TRACKS}")
        self.engine = engine
        self.start_track = start_track
        self.max_tracks = max_tracks
        self.master_left = LevelMeter()
        self.master_right = LevelMeter()

        if start_track == 0 and len(engine) == 0:
            for number, position in enumerate(_INITIAL_POSITIONS):
                engine.add_track(
                    Track(id=number, name=f"Track {number + 1}", position=position)
                )

        end = start_track + max_tracks
        self.strips = [_ChannelStrip(track) for track in engine.tracks[start_track:end]]

    @property
    def tracks(self) -> list[Track]:
        """The tracks shown on this panel, in strip order."""
        return [strip.track for strip in self.strips]

    def can_add_track(self) -> bool:
        """Whether this panel has room for another strip."""
        return len(self.strips) < self.max_tracks

    def can_remove_track(self) -> bool:
        """Whether a strip can be removed without leaving the panel empty."""
        return len(self.strips) > MIN_TRACKS

    def add_track(self) -> Track | None:
        """Create a track on the engine and a strip for it on this panel.

        Raises TrackLimitError when the engine already holds its maximum.
        Returns None when this panel is full and the track belongs on a new panel.
        """
        if len(self.engine) >= self.engine.max_tracks:
            raise TrackLimitError(
                f"Maximum number of tracks ({self.engine.max_tracks}) has been reached"
            )
        if not self.can_add_track():
            return None
        track = Track(
            id=len(self.engine),
            name=f"Track {self.start_track + len(self.strips) + 1}",
        )
        self.engine.add_track(track)
        self.strips.append(_ChannelStrip(track))
        return track

    def remove_track(self) -> Track:
        """Remove the last strip and its track from the engine.

        Raises ValueError when only one strip remains.
        """
        if not self.can_remove_track():
            raise ValueError("Cannot remove the last track. At least one track must remain.")
        strip = self.strips.pop()
        for index, track in enumerate(self.engine.tracks):
            if track is strip.track:
                self.engine.remove_track(index)
                break
        return strip.track

    def set_solo(self, track_index: int, solo: bool) -> None:
        """Solo or unsolo an engine track and show the result on every solo button."""
        self.engine.set_solo(track_index, solo)
        for strip in self.strips:
            strip.solo.toggled = strip.track.solo

    def set_volume(self, track_index: int, slider_value: int) -> float:
        """Apply a volume slider position (0-200 percent) to a track; return the gain."""
        volume = _slider(slider_value, VOLUME_SLIDER_RANGE) / 100.0
        self.engine.track(track_index).volume = volume
        return volume

    def set_pan(self, track_index: int, slider_value: int) -> float:
        """Apply a pan slider position (-100 left to 100 right) to a track; return the pan."""
        pan = _slider(slider_value, PAN_SLIDER_RANGE) / 100.0
        self.engine.track(track_index).pan = pan
        return pan

    def set_master_volume(self, slider_value: int) -> float:
        """Apply the master slider position (0-100 percent); return the master gain."""
        volume = _slider(slider_value, MASTER_SLIDER_RANGE) / 100.0
        self.engine.master_volume = volume
        return volume

    def update_meters(self) -> MasterLevels:
        """Refresh every strip meter and the master meters from this panel's tracks."""
        for strip in self.strips:
            strip.meter.set_level(strip.track.peak_level, strip.track.rms_level)
        levels = mix_master_levels(self.tracks, self.engine.master_volume, len(self.strips))
        self.master_left.set_level(levels.peak_left, levels.rms_left)
        self.master_right.set_level(levels.peak_right, levels.rms_right)
        return levels

    def status_text(self) -> str:
        """Transport state followed by this panel's window number."""
        number = self.start_track // TRACKS_PER_WINDOW_NUMBER + 1
        return f"{self.engine.status} (W{number})"