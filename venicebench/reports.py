"""Text, HTML, CSV and JSON reports of benchmark results, and run history."""

from __future__ import annotations

import html
import json
import os
import platform
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from venicebench.results import (
    BenchmarkResult,
    group_by_category,
    overall_score,
    rating_for,
)

EXPORT_BASENAME = "VeniceDAW_Benchmark_Results"
HISTORY_PREFIX = "benchmark_"
HISTORY_PATTERN = "benchmark_%Y%m%d_%H%M%S.json"
DEFAULT_HISTORY_LIMIT = 5

_HTML_STYLE = (
    "body { font-family: Arial, sans-serif; margin: 20px; background: #f5f5f5; }\n"
    ".header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); "
    "color: white; padding: 20px; border-radius: 10px; margin-bottom: 20px; }\n"
    ".section { background: white; padding: 15px; margin-bottom: 15px; "
    "border-radius: 8px; box-shadow: 0 2px 5px rgba(0,0,0,0.1); }\n"
    ".score { font-size: 24px; font-weight: bold; color: #4CAF50; }\n"
    ".test-result { display: flex; justify-content: space-between; padding: 8px; "
    "margin: 5px 0; background: #f9f9f9; border-radius: 5px; }\n"
    ".category-header { background: #2196F3; color: white; padding: 10px; "
    "border-radius: 5px; font-weight: bold; }\n"
)


class ExportFormat(str, Enum):
    """Formats a report can be exported in."""

    TXT = "txt"
    HTML = "html"
    CSV = "csv"


@dataclass(frozen=True)
class SystemInfo:
    """The machine facts printed at the head of a report."""

    cpu_count: int
    total_ram_mb: int
    used_ram_mb: int
    kernel: str

    @classmethod
    def collect(cls) -> SystemInfo:
        """Describe the machine this process runs on."""
        total_mb = 0
        used_mb = 0
        try:
            page_size = os.sysconf("SC_PAGE_SIZE")
            total_pages = os.sysconf("SC_PHYS_PAGES")
        except (AttributeError, ValueError, OSError):
            page_size = total_pages = 0
        if page_size > 0 and total_pages > 0:
            total_mb = total_pages * page_size // (1024 * 1024)
            try:
                free_pages = os.sysconf("SC_AVPHYS_PAGES")
            except (AttributeError, ValueError, OSError):
                free_pages = -1
            if 0 <= free_pages <= total_pages:
                used_mb = (total_pages - free_pages) * page_size // (1024 * 1024)
        kernel = " ".join(part for part in (platform.system(), platform.release()) if part)
        return cls(
            cpu_count=os.cpu_count() or 1,
            total_ram_mb=total_mb,
            used_ram_mb=used_mb,
            kernel=kernel or "unknown",
        )


def _num(value: float) -> str:
    return f"{value:.2f}"


def results_listing(results: Sequence[BenchmarkResult]) -> list[str]:
    """Lines of the detailed results list, grouped by category, with a summary."""
    lines = ["=== BENCHMARK RESULTS ===", ""]
    for category, members in group_by_category(results).items():
        lines.append(f"[{category}]")
        for result in members:
            lines.append(
                f"  • {result.name:<40s}: {result.value:8.2f} {result.unit:<10s} "
                f"(Score: {result.score:5.1f}/100)"
            )
        lines.append("")
    if results:
        total = overall_score(results)
        lines.append("=== SUMMARY ===")
        lines.append(f"Total Tests: {len(results)}")
        lines.append(f"Overall Score: {total:.1f}/100")
        lines.append(f"Performance Rating: {rating_for(total)}")
    return lines


def render_txt(
    results: Iterable[BenchmarkResult],
    total_score: float,
    system: SystemInfo,
    generated: int,
) -> str:
    """Plain-text report; generated is the time stamp printed in its header."""
    parts = [
        "VeniceDAW Benchmark Results\n",
        f"Generated: {generated}\n\n",
        "System Information:\n",
        f"CPU Cores: {system.cpu_count}\n",
        f"Total RAM: {system.total_ram_mb}MB\n",
        f"Used RAM: {system.used_ram_mb}MB\n",
        f"Kernel: {system.kernel}\n\n",
    ]
    for category, members in group_by_category(results).items():
        parts.append(f"[{category}]\n")
        for result in members:
            parts.append(
                f"  {result.name}: {_num(result.value)} {result.unit} "
                f"(Score: {_num(result.score)}/100)\n"
            )
        parts.append("\n")
    parts.append(f"Overall Score: {_num(total_score)}/100\n")
    return "".join(parts)


def render_html(
    results: Iterable[BenchmarkResult],
    total_score: float,
    system: SystemInfo,
) -> str:
    """Self-contained HTML report."""
    esc = lambda text: html.escape(str(text), quote=False)  # noqa: E731
    parts = [
        "<!DOCTYPE html>\n<html>\n<head>\n",
        "<title>VeniceDAW Benchmark Results</title>\n",
        "<style>\n",
        _HTML_STYLE,
        "</style>\n",
        "</head>\n<body>\n",
        "<div class='header'>\n",
        "<h1>🎵 VeniceDAW Performance Station</h1>\n",
        "<p>Complete system performance analysis for audio production</p>\n",
        "</div>\n",
        "<div class='section'>\n",
        "<h2>📋 System Information</h2>\n",
        f"<p><strong>CPU:</strong> {system.cpu_count} cores</p>\n",
        f"<p><strong>RAM:</strong> {system.total_ram_mb}MB total, "
        f"{system.used_ram_mb}MB used</p>\n",
        f"<p><strong>Kernel:</strong> {esc(system.kernel)}</p>\n",
        "</div>\n",
        "<div class='section'>\n",
        "<h2>🎯 Overall Performance</h2>\n",
        f"<div class='score'>{_num(total_score)}/100</div>\n",
        "</div>\n",
        "<div class='section'>\n",
        "<h2>📊 Detailed Results</h2>\n",
    ]
    for category, members in group_by_category(results).items():
        parts.append(f"<div class='category-header'>{esc(category)}</div>\n")
        for result in members:
            parts.append("<div class='test-result'>\n")
            parts.append(f"<span><strong>{esc(result.name)}</strong></span>\n")
            parts.append(
                f"<span>{_num(result.value)} {esc(result.unit)} "
                f"(Score: {_num(result.score)}/100)</span>\n"
            )
            parts.append("</div>\n")
    parts.append("</div>\n")
    parts.append("</body>\n</html>\n")
    return "".join(parts)


def _csv_text(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def render_csv(results: Iterable[BenchmarkResult]) -> str:
    """One CSV row per result, text columns quoted, numbers bare."""
    lines = ["Test Name,Category,Value,Unit,Duration (ms),Score\n"]
    for result in results:
        lines.append(
            ",".join(
                (
                    _csv_text(result.name),
                    _csv_text(result.category),
                    _num(result.value),
                    _csv_text(result.unit),
                    _num(result.duration),
                    _num(result.score),
                )
            )
            + "\n"
        )
    return "".join(lines)


def render_history_json(
    results: Iterable[BenchmarkResult],
    total_score: float,
    when: datetime,
) -> str:
    """JSON record of one run, as kept in the history directory."""
    document = {
        "timestamp": int(when.timestamp()),
        "date": time.asctime(when.timetuple()),
        "overall_score": round(total_score, 2),
        "results": [
            {
                "name": result.name,
                "category": result.category,
                "value": round(result.value, 2),
                "unit": result.unit,
                "score": round(result.score, 2),
            }
            for result in results
        ],
    }
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def history_filename(when: datetime) -> str:
    """Name of the history file for a run finished at the given time."""
    return when.strftime(HISTORY_PATTERN)


def _default_export_directory() -> Path:
    return Path.home() / "Desktop"


def _default_history_directory() -> Path:
    return Path.home() / ".config" / "VeniceDAW"


def export(
    results: Sequence[BenchmarkResult],
    total_score: float,
    fmt: ExportFormat | str,
    directory: str | os.PathLike[str] | None = None,
    system: SystemInfo | None = None,
) -> Path:
    """Write a report in the given format and return the file written.

    Raises ValueError for an unknown format.
    """
    try:
        kind = ExportFormat(str(fmt.value if isinstance(fmt, ExportFormat) else fmt).lower())
    except ValueError:
        raise ValueError(f"unknown export format: {fmt!r}") from None
    target_dir = Path(directory) if directory is not None else _default_export_directory()
    target_dir.mkdir(parents=True, exist_ok=True)
    if kind is ExportFormat.CSV:
        content = render_csv(results)
    else:
        info = system if system is not None else SystemInfo.collect()
        if kind is ExportFormat.TXT:
            content = render_txt(results, total_score, info, int(time.time()))
        else:
            content = render_html(results, total_score, info)
    path = target_dir / f"{EXPORT_BASENAME}.{kind.value}"
    path.write_text(content, encoding="utf-8")
    return path


def save_history(
    results: Sequence[BenchmarkResult],
    total_score: float,
    directory: str | os.PathLike[str] | None = None,
    when: datetime | None = None,
) -> Path:
    """Record a finished run in the history directory and return its file."""
    moment = when if when is not None else datetime.now()
    target_dir = Path(directory) if directory is not None else _default_history_directory()
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / history_filename(moment)
    path.write_text(render_history_json(results, total_score, moment), encoding="utf-8")
    return path


def list_history(
    directory: str | os.PathLike[str] | None = None,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[datetime]:
    """Times of the most recent recorded runs, newest first.

    A missing directory simply has no history.
    """
    target_dir = Path(directory) if directory is not None else _default_history_directory()
    if not target_dir.is_dir():
        return []
    found = []
    for entry in target_dir.iterdir():
        if not entry.name.startswith(HISTORY_PREFIX):
            continue
        try:
            found.append(datetime.strptime(entry.name, HISTORY_PATTERN))
        except ValueError:
            continue
    found.sort(reverse=True)
    return found[: max(0, limit)]