"""The benchmark tests themselves, the full and per-category runs, and the command line."""

from __future__ import annotations

import argparse
import math
import random
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from venicebench.reports import ExportFormat, export, results_listing, save_history
from venicebench.results import BenchmarkResult, BenchmarkSession, rating_for

SAMPLE_RATE = 44100.0
BYTES_PER_SAMPLE = 4
MEBIBYTE = 1024 * 1024
LATENCY_BUFFER_SIZES = (64, 128, 256, 512, 1024, 2048)
ALLOCATION_SIZES = (1024, 4096, 16384, 65536, 262144)
SINE_TABLE_SIZE = 4096
CATEGORIES = ("audio", "memory", "system", "3d")

_MIN_DURATION_MS = 1e-6
_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class ProgressUpdate:
    """A progress report from a running benchmark: percentage, status line, or both."""

    progress: float | None = None
    status: str | None = None


ProgressCallback = Callable[[ProgressUpdate], None]


def _emit(
    progress: ProgressCallback | None,
    percent: float | None = None,
    status: str | None = None,
) -> None:
    if progress is not None:
        progress(ProgressUpdate(percent, status))


def _elapsed_ms(start_ns: int) -> float:
    return max(_MIN_DURATION_MS, (time.perf_counter_ns() - start_ns) / 1e6)


def _count_label(count: int) -> str:
    if count >= 1_000_000 and count % 1_000_000 == 0:
        return f"{count // 1_000_000}M"
    return str(count)


def latency_score(latency_ms: float) -> float:
    """Score of a buffer latency: lower latency scores higher."""
    if latency_ms <= 3.0:
        return 100.0
    if latency_ms <= 6.0:
        return 90.0
    if latency_ms <= 12.0:
        return 75.0
    if latency_ms <= 24.0:
        return 50.0
    return 25.0


def audio_engine_test(
    progress: ProgressCallback | None = None,
    buffer_size: int = 512,
    iterations: int = 2000,
) -> BenchmarkResult:
    """Time a stereo DSP chain (filter, gain, reverb) over many audio callbacks."""
    if buffer_size < 1 or iterations < 1:
        raise ValueError("buffer_size and iterations must be positive")
    samples = buffer_size * 2
    _emit(progress, None, f"Initializing {buffer_size}-sample stereo audio buffers...")
    _emit(progress, 15.0, "Warming up CPU cache (100 cycles)...")
    buffer = [0.0] * samples
    for _ in range(100):
        buffer = [math.sin(j * 0.01) * 0.5 for j in range(samples)]

    _emit(
        progress,
        25.0,
        f"Running DSP chain: filter→gain→reverb ({iterations} iterations)...",
    )
    hp_z1 = 0.0
    delay_line = [0.0] * 128
    delay_idx = 0
    start = time.perf_counter_ns()
    for i in range(iterations):
        for j in range(samples):
            sample = math.sin(j * 0.01 + i * 0.001) * 0.7
            hp_out = sample - hp_z1 * 0.995
            hp_z1 = sample
            hp_out *= 0.8
            delayed = delay_line[delay_idx]
            delay_line[delay_idx] = hp_out + delayed * 0.3
            delay_idx = (delay_idx + 1) % 128
            buffer[j] = hp_out + delayed * 0.2
        if i % 200 == 0:
            fraction = i / iterations
            _emit(
                progress,
                25.0 + fraction * 65.0,
                f"Processing audio samples... {fraction * 100.0:.1f}% "
                f"({i}/{iterations} callbacks)",
            )
    duration = _elapsed_ms(start)

    avg_callback = duration / iterations
    buffer_time = buffer_size / SAMPLE_RATE * 1000.0
    cpu_usage = avg_callback / buffer_time * 100.0
    efficiency = max(0.0, min(100.0, 100.0 - cpu_usage))
    samples_per_sec = samples * iterations * 1000.0 / duration
    throughput_mb = samples_per_sec * BYTES_PER_SAMPLE / MEBIBYTE
    max_tracks = int(100.0 / cpu_usage) if efficiency > 10.0 else 1

    _emit(
        progress,
        95.0,
        f"Results: {avg_callback:.3f}ms/callback, {cpu_usage:.1f}% CPU, "
        f"~{max_tracks} max tracks",
    )
    return BenchmarkResult(
        name=f"Audio Engine ({throughput_mb:.1f}MB/s, {max_tracks} max tracks)",
        category="Audio Processing",
        value=avg_callback,
        unit="ms/callback",
        duration=duration,
        score=efficiency,
    )


def audio_latency_test(
    progress: ProgressCallback | None = None,
    passes: int = 1000,
) -> BenchmarkResult:
    """Find the smallest buffer size that can be filled with headroom to spare."""
    if passes < 1:
        raise ValueError("passes must be positive")
    _emit(progress, None, "Testing audio latency with different buffer sizes...")
    best_latency = 1000.0
    best_buffer = 512
    total_score = 0.0
    for size in LATENCY_BUFFER_SIZES:
        latency = size / SAMPLE_RATE * 1000.0
        start = time.perf_counter_ns()
        for _ in range(passes):
            buffer = [math.sin(k * 0.01) * 0.5 for k in range(size * 2)]
        del buffer
        processing_ms = (time.perf_counter_ns() - start) / 1e6
        viable = processing_ms < latency * 0.8
        if viable and latency < best_latency:
            best_latency = latency
            best_buffer = size
        if viable:
            total_score += latency_score(latency)
        _emit(
            progress,
            None,
            f"Buffer {size} samples: {latency:.2f}ms latency "
            f"({'OK' if viable else 'Too slow'})",
        )
    return BenchmarkResult(
        name=f"Audio Latency (Best: {best_buffer} samples @ {best_latency:.2f}ms)",
        category="Audio Processing",
        value=best_latency,
        unit="ms",
        duration=0.0,
        score=total_score / len(LATENCY_BUFFER_SIZES),
    )


def sine_generation_test(
    progress: ProgressCallback | None = None,
    num_samples: int = 1_000_000,
) -> BenchmarkResult:
    """Compare computing sine samples directly with reading them from a table."""
    if num_samples < 1:
        raise ValueError("num_samples must be positive")
    _emit(progress, None, "Testing sine wave generation performance...")
    buffer = [0.0] * num_samples
    phase_inc = _TWO_PI * 440.0 / SAMPLE_RATE

    phase = 0.0
    start = time.perf_counter_ns()
    for i in range(num_samples):
        buffer[i] = math.sin(phase)
        phase += phase_inc
        if phase > _TWO_PI:
            phase -= _TWO_PI
    standard_ms = _elapsed_ms(start)
    _emit(
        progress,
        None,
        f"Standard sinf(): {standard_ms:.2f}ms for {_count_label(num_samples)} samples",
    )

    table = [math.sin(i / SINE_TABLE_SIZE * _TWO_PI) for i in range(SINE_TABLE_SIZE)]
    phase = 0.0
    start = time.perf_counter_ns()
    for i in range(num_samples):
        buffer[i] = table[int(phase * SINE_TABLE_SIZE / _TWO_PI) % SINE_TABLE_SIZE]
        phase += phase_inc
        if phase > _TWO_PI:
            phase -= _TWO_PI
    lookup_ms = _elapsed_ms(start)

    speedup = standard_ms / lookup_ms
    _emit(progress, None, f"Lookup table: {lookup_ms:.2f}ms ({speedup:.1f}x speedup)")
    return BenchmarkResult(
        name=f"Sine Generation ({speedup:.1f}x speedup with lookup)",
        category="Audio Processing",
        value=speedup,
        unit="x faster",
        duration=lookup_ms,
        score=min(100.0, speedup * 25.0),
    )


def buffer_processing_test(
    progress: ProgressCallback | None = None,
    iterations: int = 5000,
) -> BenchmarkResult:
    """Measure throughput of a stereo biquad filter followed by a limiter."""
    if iterations < 1:
        raise ValueError("iterations must be positive")
    buffer_size = 512
    channels = 2
    _emit(progress, None, "Testing DSP throughput with filters...")
    signal = [random.randrange(1000) / 500.0 - 1.0 for _ in range(buffer_size * channels)]
    output = [0.0] * len(signal)

    a1, a2 = -1.979, 0.9802
    b0, b1, b2 = 0.0001, 0.0002, 0.0001
    z1 = [0.0] * channels
    z2 = [0.0] * channels

    start = time.perf_counter_ns()
    for iteration in range(iterations):
        for ch in range(channels):
            for idx in range(ch, buffer_size * channels, channels):
                sample = signal[idx]
                out = b0 * sample + z1[ch]
                z1[ch] = b1 * sample - a1 * out + z2[ch]
                z2[ch] = b2 * sample - a2 * out
                magnitude = abs(out)
                gain = 0.7 / magnitude if magnitude > 0.7 else 1.0
                output[idx] = out * gain
        if iteration % 500 == 0:
            _emit(
                progress,
                None,
                f"Processing DSP filters... {iteration}/{iterations} iterations",
            )
    duration = _elapsed_ms(start)

    samples_per_sec = buffer_size * channels * iterations * 1000.0 / duration
    throughput_mb = samples_per_sec * BYTES_PER_SAMPLE / MEBIBYTE
    return BenchmarkResult(
        name=f"DSP Processing ({throughput_mb:.1f} MB/s throughput)",
        category="Audio Processing",
        value=throughput_mb,
        unit="MB/s",
        duration=duration,
        score=min(100.0, throughput_mb / 50.0 * 100.0),
    )


def memory_bandwidth_test(
    progress: ProgressCallback | None = None,
    buffer_size: int = 8 * MEBIBYTE,
    iterations: int = 50,
) -> BenchmarkResult:
    """Measure memory bandwidth by copying a large buffer repeatedly."""
    if buffer_size < 1 or iterations < 1:
        raise ValueError("buffer_size and iterations must be positive")
    _emit(progress, 52.0, f"Allocating {buffer_size / MEBIBYTE:g}MB memory buffers...")
    _emit(progress, 55.0, "Initializing memory patterns...")
    whole, rest = divmod(buffer_size, 256)
    pattern = bytes(range(256))
    source = pattern * whole + pattern[:rest]
    target = bytearray(buffer_size)

    _emit(
        progress,
        60.0,
        f"Testing memory copy performance ({iterations} iterations)...",
    )
    start = time.perf_counter_ns()
    for i in range(iterations):
        target[:] = source
        if i % 10 == 0:
            fraction = i / iterations
            _emit(
                progress,
                60.0 + fraction * 30.0,
                f"Memory copy test: {i}/{iterations} iterations ({fraction * 100.0:.1f}%)",
            )
    duration_s = _elapsed_ms(start) / 1000.0

    total_mb = buffer_size * iterations * 2 / MEBIBYTE
    bandwidth = total_mb / duration_s
    _emit(
        progress,
        95.0,
        f"Memory: {bandwidth:.1f} MB/s bandwidth, {duration_s:.2f} seconds total",
    )
    return BenchmarkResult(
        name=f"Memory Bandwidth ({total_mb:.1f}MB total, {duration_s:.2f}s)",
        category="Memory",
        value=bandwidth,
        unit="MB/s",
        duration=duration_s * 1000.0,
        score=min(100.0, bandwidth / 2000.0 * 100.0),
    )


def memory_patterns_test(
    progress: ProgressCallback | None = None,
    allocations: int = 1000,
) -> BenchmarkResult:
    """Time filling and releasing many blocks of several sizes, last in first out."""
    if allocations < 1:
        raise ValueError("allocations must be positive")
    _emit(progress, None, "Testing memory allocation patterns...")
    start = time.perf_counter_ns()
    for size in ALLOCATION_SIZES:
        blocks = [bytearray(b"\xaa") * size for _ in range(allocations)]
        while blocks:
            blocks.pop()
    duration = _elapsed_ms(start)
    return BenchmarkResult(
        name="Memory Allocation Patterns",
        category="Memory",
        value=duration / (allocations * len(ALLOCATION_SIZES)),
        unit="ms/operation",
        duration=duration,
        score=max(0.0, min(100.0, 100.0 - duration / 10.0)),
    )


def _cpu_work(work_size: int, thread_id: int) -> float:
    total = 0.0
    offset = thread_id * work_size
    for i in range(work_size):
        index = i + offset
        total += math.sin(index * 0.0001) * math.cos(index * 0.0002)
    return total


def cpu_scaling_test(
    progress: ProgressCallback | None = None,
    work_size: int = 10_000_000,
    workers: int | None = None,
) -> BenchmarkResult:
    """Compare one thread doing all the work with the work split across threads."""
    _emit(progress, 77.0, "Detecting CPU configuration...")
    import os

    cores = workers if workers is not None else (os.cpu_count() or 1)
    if cores < 1:
        raise ValueError("workers must be at least 1")
    if work_size < 1:
        raise ValueError("work_size must be positive")
    _emit(
        progress,
        78.0,
        f"Found {cores} CPU cores, testing single-thread performance...",
    )
    _emit(
        progress,
        80.0,
        f"Running single-thread benchmark ({_count_label(work_size)} operations)...",
    )
    start = time.perf_counter_ns()
    _cpu_work(work_size, 0)
    single_ms = _elapsed_ms(start)
    _emit(
        progress,
        85.0,
        f"Single-thread: {single_ms:.2f}ms, starting multi-thread test ({cores} threads)...",
    )

    share = work_size // cores
    partials = [0.0] * cores

    def worker(thread_id: int) -> None:
        partials[thread_id] = _cpu_work(share, thread_id)

    _emit(progress, 88.0, "Spawning worker threads...")
    start = time.perf_counter_ns()
    threads = [
        threading.Thread(target=worker, args=(core,), name=f"cpu_test_{core}")
        for core in range(cores)
    ]
    for thread in threads:
        thread.start()
    _emit(progress, 90.0, f"Running {cores} threads in parallel...")
    for thread in threads:
        thread.join()
    multi_ms = _elapsed_ms(start)

    speedup = single_ms / multi_ms
    efficiency = speedup / cores * 100.0
    _emit(
        progress,
        98.0,
        f"CPU: {speedup:.1f}x speedup, {efficiency:.1f}% efficiency ({cores} cores)",
    )
    return BenchmarkResult(
        name=f"CPU Scaling ({cores} cores, {speedup:.1f}x speedup)",
        category="CPU",
        value=efficiency,
        unit="% efficiency",
        duration=multi_ms,
        score=min(100.0, efficiency),
    )


def realtime_test(
    progress: ProgressCallback | None = None,
    iterations: int = 100,
    interval: float = 0.01,
) -> BenchmarkResult:
    """Do a slice of work per period and count the periods whose deadline was missed."""
    if iterations < 1:
        raise ValueError("iterations must be positive")
    if interval < 0:
        raise ValueError("interval must not be negative")
    _emit(progress, None, "Testing realtime performance...")
    missed = 0
    deadline = time.perf_counter() + interval
    for _ in range(iterations):
        work = 0.0
        for j in range(10000):
            work += math.sin(j * 0.001)
        now = time.perf_counter()
        if now > deadline:
            missed += 1
        elif now < deadline:
            time.sleep(deadline - now)
        deadline += interval
    met = iterations - missed
    success = met / iterations * 100.0
    return BenchmarkResult(
        name=f"Realtime Performance ({met}/{iterations} deadlines met)",
        category="System",
        value=success,
        unit="% success",
        duration=0.0,
        score=success,
    )


def simulation_3d_test(
    progress: ProgressCallback | None = None,
    objects: int = 100,
    frames: int = 60,
    rng: random.Random | None = None,
) -> BenchmarkResult:
    """Step a bouncing-object simulation with per-object transforms and report FPS."""
    if objects < 1 or frames < 1:
        raise ValueError("objects and frames must be positive")
    generator = rng if rng is not None else random.Random()
    _emit(progress, None, "Running 3D math simulation...")
    positions = [
        [float(generator.randrange(100)) for _ in range(3)] for _ in range(objects)
    ]
    velocities = [
        [generator.randrange(10) * 0.1, generator.randrange(10) * 0.1, 0.0]
        for _ in range(objects)
    ]

    start = time.perf_counter_ns()
    for frame in range(frames):
        for i, (position, velocity) in enumerate(zip(positions, velocities)):
            for axis in range(3):
                position[axis] += velocity[axis]
                if position[axis] < 0 or position[axis] > 100:
                    velocity[axis] *= -1
            matrix = [math.sin(frame * 0.1 + i * 0.01 + j) for j in range(16)]
            del matrix
    duration = _elapsed_ms(start)

    fps = frames * 1000.0 / duration
    return BenchmarkResult(
        name=f"3D Simulation ({objects} objects @ {fps:.1f} FPS)",
        category="3D Graphics",
        value=fps,
        unit="FPS",
        duration=duration,
        score=min(100.0, fps / 60.0 * 100.0),
    )


def run_all(
    session: BenchmarkSession | None = None,
    progress: ProgressCallback | None = None,
) -> BenchmarkSession:
    """Run the audio, memory and CPU tests in order and score the session."""
    session = session if session is not None else BenchmarkSession()
    session.clear()
    _emit(progress, 10.0, "Starting audio engine test...")
    session.add(audio_engine_test(progress))
    _emit(progress, 25.0, "Audio engine test complete, testing latency...")
    session.add(audio_latency_test(progress))
    _emit(progress, 35.0, "Latency test complete, testing sine generation...")
    session.add(sine_generation_test(progress))
    _emit(progress, 45.0, "Sine test complete, testing DSP throughput...")
    session.add(buffer_processing_test(progress))
    _emit(progress, 50.0, "All audio tests complete, starting memory test...")
    session.add(memory_bandwidth_test(progress))
    _emit(progress, 75.0, "Memory test complete, starting CPU scaling test...")
    session.add(cpu_scaling_test(progress))
    _emit(progress, 100.0, "All tests complete!")
    session.finalize()
    return session


def run_category(
    category: str,
    session: BenchmarkSession | None = None,
    progress: ProgressCallback | None = None,
) -> BenchmarkSession:
    """Run the tests of one category and score the session.

    Raises ValueError for a category that is not one of CATEGORIES.
    """
    key = category.lower()
    if key not in CATEGORIES:
        raise ValueError(f"unknown benchmark category: {category!r}")
    session = session if session is not None else BenchmarkSession()
    session.clear()
    if key == "audio":
        _emit(progress, 10.0, "Running audio tests...")
        session.add(audio_engine_test(progress))
        _emit(progress, 30.0)
        session.add(audio_latency_test(progress))
        _emit(progress, 60.0)
        session.add(sine_generation_test(progress))
        _emit(progress, 90.0)
        session.add(buffer_processing_test(progress))
    elif key == "memory":
        _emit(progress, 10.0, "Running memory tests...")
        session.add(memory_bandwidth_test(progress))
        _emit(progress, 50.0, "Testing memory patterns...")
        session.add(memory_patterns_test(progress))
    elif key == "system":
        _emit(progress, 10.0, "Running CPU tests...")
        session.add(cpu_scaling_test(progress))
        _emit(progress, 50.0, "Testing realtime performance...")
        session.add(realtime_test(progress))
    else:
        _emit(progress, 10.0, "Running 3D simulation tests...")
        session.add(simulation_3d_test(progress))
    session.finalize()
    _emit(progress, 100.0, "Category tests complete!")
    return session


def _print_update(update: ProgressUpdate) -> None:
    if update.progress is not None and update.status:
        print(f"[{update.progress:5.1f}%] {update.status}", flush=True)
    elif update.status:
        print(f"        {update.status}", flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the benchmark from the command line and print the results."""
    parser = argparse.ArgumentParser(
        prog="venicebench",
        description="Measure how well this machine handles audio workstation loads.",
    )
    parser.add_argument(
        "category",
        nargs="?",
        default="all",
        choices=("all", *CATEGORIES),
        help="which tests to run (default: all)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="hide progress lines")
    parser.add_argument(
        "--export",
        choices=[fmt.value for fmt in ExportFormat],
        help="also write a report in this format",
    )
    parser.add_argument("--output", help="directory for the exported report")
    parser.add_argument(
        "--save-history", action="store_true", help="record this run in the history"
    )
    parser.add_argument("--history-dir", help="directory holding the run history")
    args = parser.parse_args(argv)

    callback = None if args.quiet else _print_update
    if args.category == "all":
        session = run_all(progress=callback)
    else:
        session = run_category(args.category, progress=callback)

    for line in results_listing(session.results):
        print(line)

    if args.export:
        path = export(session.results, session.total_score, args.export, args.output)
        print(f"Report written to {path}")
    if args.save_history:
        path = save_history(session.results, session.total_score, args.history_dir)
        print(f"History saved to {path}")
    if not session.results:
        print(f"Rating: {rating_for(session.total_score)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())