"""Audio-workstation performance benchmarks, reports, run history and a headless mixer model."""

__version__ = "0.1.0"
__all__ = ["panel", "presentation", "reports", "results", "suite", "tracks"]