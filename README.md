# venicebench

A performance benchmark suite for audio work, written in pure Python,
together with report exporters, a run history and a headless model of a
track mixer.

## Installation

    pip install venicebench

## Running the benchmarks

    venicebench

runs the full suite in order: audio engine (a filter, gain and reverb
chain over 512-sample stereo callbacks), audio latency across buffer
sizes from 64 to 2048 samples, sine generation (direct versus lookup
table), DSP throughput (biquad filter and limiter), memory bandwidth and
CPU scaling across threads. Progress lines are printed as it goes, then
the results grouped by category, the overall score out of 100 and a
rating: EXCELLENT, VERY GOOD, GOOD, FAIR or NEEDS IMPROVEMENT.

Pass a category to run only part of the suite:

    venicebench audio     # the four audio tests
    venicebench memory    # memory bandwidth and allocation patterns
    venicebench system    # CPU scaling and realtime deadlines
    venicebench 3d        # bouncing-object simulation, reported in FPS

Options:

- `-q`, `--quiet` — hide the progress lines
- `--export {txt,html,csv}` — also write a report; `--output DIR` chooses
  its directory (default `~/Desktop`)
- `--save-history` — record the run as a JSON file; `--history-dir DIR`
  chooses the directory (default `~/.config/VeniceDAW`)

## Using the library

```python
from venicebench.results import rating_for
from venicebench.suite import run_all, run_category
from venicebench.reports import export, save_history, list_history

session = run_all(progress=print)        # each update is a ProgressUpdate
print(session.total_score, rating_for(session.total_score))

export(session.results, session.total_score, "html", "reports")
save_history(session.results, session.total_score, "history")
print(list_history("history"))           # newest run times first
```

- `venicebench.results` — `BenchmarkResult`, `BenchmarkSession`
  (`add`, `clear`, `finalize`), and `overall_score`, `category_averages`,
  `group_by_category`, `best_result`, `rating_for`.
- `venicebench.suite` — each test as its own function
  (`audio_engine_test`, `audio_latency_test`, `sine_generation_test`,
  `buffer_processing_test`, `memory_bandwidth_test`,
  `memory_patterns_test`, `cpu_scaling_test`, `realtime_test`,
  `simulation_3d_test`), sizes adjustable through their arguments, plus
  `run_all`, `run_category` and `main`.
- `venicebench.reports` — `render_txt`, `render_html`, `render_csv`,
  `render_history_json`, `results_listing`, `SystemInfo.collect`,
  `export`, `save_history`, `list_history`.
- `venicebench.presentation` — colours, gauge angles, pie slices and
  status lines for drawing results.

## Mixer model

`venicebench.tracks` provides `Track` (volume, pan, mute, solo, peak and
RMS levels), `MixerEngine` (at most 32 tracks, raising `TrackLimitError`
beyond that; only one track solo at a time), `LevelMeter`, `ToggleButton`,
`pan_gains` and `mix_master_levels`.

`venicebench.panel.MixerPanel` manages the channel strips for up to eight
tracks of an engine. The first panel on an empty engine adds four tracks.
`add_track` returns `None` when the panel is full, `remove_track` refuses
to remove the last strip, slider positions are turned into volume, pan and
master gains, `update_meters` computes the master levels, and
`status_text` gives e.g. `Stopped (W1)`.

## What it does not do

There is no graphical window, chart or 3D view; the presentation helpers
only compute colours and geometry. The mixer model plays and records no
sound: `start` and `stop` only flip its state, and track levels are
whatever the caller sets.

## Tests

    pip install venicebench[test]
    pytest