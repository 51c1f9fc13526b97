import pytest

from venicebench.panel import MixerPanel
from venicebench.tracks import MixerEngine, Track, TrackLimitError, mix_master_levels


def _engine_with(count):
    engine = MixerEngine()
    for number in range(count):
        engine.add_track(Track(id=number, name=f"T{number}"))
    return engine


def test_first_panel_seeds_empty_engine():
    engine = MixerEngine()
    panel = MixerPanel(engine)
    assert [t.name for t in engine.tracks] == ["Track 1", "Track 2", "Track 3", "Track 4"]
    assert [t.id for t in engine.tracks] == [0, 1, 2, 3]
    assert engine.tracks[0].position == (-2.0, 0.0, 1.0)
    assert engine.tracks[3].position == (0.0, -1.0, 0.0)
    assert panel.tracks == engine.tracks


def test_existing_tracks_not_reseeded():
    engine = _engine_with(2)
    panel = MixerPanel(engine)
    assert len(engine) == 2
    assert [t.name for t in panel.tracks] == ["T0", "T1"]


def test_later_panel_shows_only_its_range():
    engine = _engine_with(10)
    panel = MixerPanel(engine, start_track=8)
    assert [t.name for t in panel.tracks] == ["T8", "T9"]
    empty = MixerPanel(MixerEngine(), start_track=8)
    assert empty.tracks == []


def test_invalid_construction():
    with pytest.raises(ValueError):
        MixerPanel(MixerEngine(), max_tracks=0)
    with pytest.raises(ValueError):
        MixerPanel(MixerEngine(), start_track=-1)


def test_add_track_names_and_ids():
    engine = MixerEngine()
    panel = MixerPanel(engine)
    track = panel.add_track()
    assert track.name == "Track 5"
    assert track.id == 4
    assert engine.tracks[-1] is track
    assert panel.tracks[-1] is track


def test_full_panel_returns_none():
    engine = _engine_with(3)
    panel = MixerPanel(engine, max_tracks=3)
    assert not panel.can_add_track()
    assert panel.add_track() is None
    assert len(engine) == 3


def test_global_limit_raises():
    engine = _engine_with(32)
    panel = MixerPanel(engine)
    with pytest.raises(TrackLimitError):
        panel.add_track()
    assert len(engine) == 32


def test_remove_until_last_track():
    engine = _engine_with(2)
    panel = MixerPanel(engine)
    removed = panel.remove_track()
    assert removed.name == "T1"
    assert [t.name for t in engine.tracks] == ["T0"]
    assert not panel.can_remove_track()
    with pytest.raises(ValueError):
        panel.remove_track()
    assert len(panel.tracks) == 1


def test_solo_is_exclusive_and_buttons_follow():
    engine = _engine_with(3)
    panel = MixerPanel(engine)
    panel.set_solo(0, True)
    panel.set_solo(2, True)
    assert [t.solo for t in engine.tracks] == [False, False, True]
    assert [s.solo.toggled for s in panel.strips] == [False, False, True]
    panel.set_solo(2, False)
    assert not any(s.solo.toggled for s in panel.strips)


def test_volume_pan_master_sliders():
    engine = _engine_with(1)
    panel = MixerPanel(engine)
    assert panel.set_volume(0, 150) == 1.5
    assert engine.tracks[0].volume == 1.5
    assert panel.set_volume(0, 500) == 2.0
    assert panel.set_pan(0, -100) == -1.0
    assert engine.tracks[0].pan == -1.0
    assert panel.set_master_volume(50) == 0.5
    assert engine.master_volume == 0.5
    with pytest.raises(IndexError):
        panel.set_volume(5, 100)


def test_update_meters_matches_mix():
    engine = _engine_with(2)
    engine.tracks[0].peak_level = 0.8
    engine.tracks[0].rms_level = 0.4
    engine.tracks[1].peak_level = 1.5
    engine.tracks[1].muted = True
    panel = MixerPanel(engine)
    levels = panel.update_meters()
    assert levels == mix_master_levels(engine.tracks, engine.master_volume, 2)
    assert panel.master_left.peak_level == levels.peak_left
    assert panel.strips[0].meter.peak_level == 0.8
    assert panel.strips[1].meter.peak_level == 1.0


def test_all_muted_gives_silence():
    engine = _engine_with(2)
    for track in engine.tracks:
        track.peak_level = 0.9
        track.rms_level = 0.5
        track.muted = True
    levels = MixerPanel(engine).update_meters()
    assert tuple(levels) == (0.0, 0.0, 0.0, 0.0)


def test_status_text():
    engine = _engine_with(10)
    panel = MixerPanel(engine)
    assert panel.status_text() == "Stopped (W1)"
    engine.start()
    assert panel.status_text() == "Playing (W1)"
    assert MixerPanel(engine, start_track=8).status_text() == "Playing (W2)"