import csv
import io
import json
from datetime import datetime

import pytest

from venicebench.reports import (
    SystemInfo,
    export,
    history_filename,
    list_history,
    render_csv,
    render_history_json,
    render_html,
    render_txt,
    results_listing,
    save_history,
)
from venicebench.results import BenchmarkResult


@pytest.fixture
def system():
    return SystemInfo(cpu_count=4, total_ram_mb=8192, used_ram_mb=1024, kernel="test-kernel")


@pytest.fixture
def results():
    return [
        BenchmarkResult("Memory Bandwidth", "Memory", 1500.0, "MB/s", 120.0, 75.0),
        BenchmarkResult("Audio Latency", "Audio Processing", 2.9, "ms", 0.0, 90.0),
        BenchmarkResult("DSP Processing", "Audio Processing", 40.0, "MB/s", 10.0, 80.0),
    ]


def test_collect_reports_plausible_machine():
    info = SystemInfo.collect()
    assert info.cpu_count >= 1
    assert 0 <= info.used_ram_mb <= max(info.total_ram_mb, info.used_ram_mb)
    assert info.total_ram_mb >= 0
    assert info.kernel


def test_listing_groups_in_sorted_category_order(results):
    lines = results_listing(results)
    assert lines[0] == "=== BENCHMARK RESULTS ==="
    assert lines[1] == ""
    audio = lines.index("[Audio Processing]")
    memory = lines.index("[Memory]")
    assert audio < memory
    assert "Audio Latency" in lines[audio + 1]
    assert "DSP Processing" in lines[audio + 2]
    assert lines[audio + 1].startswith("  • ")


def test_listing_summary(results):
    lines = results_listing(results)
    summary = lines.index("=== SUMMARY ===")
    assert lines[summary + 1] == "Total Tests: 3"
    assert lines[summary + 2].startswith("Overall Score: ")
    assert lines[summary + 3] == "Performance Rating: VERY GOOD"


def test_listing_empty_has_no_summary():
    assert results_listing([]) == ["=== BENCHMARK RESULTS ===", ""]


def test_txt_contains_system_and_results(results, system):
    text = render_txt(results, 80.0, system, 1234)
    assert text.startswith("VeniceDAW Benchmark Results\n")
    assert "Generated: 1234\n" in text
    assert "CPU Cores: 4\n" in text
    assert "Total RAM: 8192MB\n" in text
    assert "Used RAM: 1024MB\n" in text
    assert "Kernel: test-kernel\n" in text
    assert text.index("[Audio Processing]") < text.index("[Memory]")
    assert text.endswith("Overall Score: 80.00/100\n")


def test_html_structure(results, system):
    page = render_html(results, 80.0, system)
    assert page.startswith("<!DOCTYPE html>")
    assert page.rstrip().endswith("</html>")
    assert page.count("<div class='test-result'>") == len(results)
    assert page.count("<div class='category-header'>") == 2
    assert "<strong>Memory Bandwidth</strong>" in page
    assert "test-kernel" in page


def test_html_escapes_markup(system):
    page = render_html([BenchmarkResult("<b>x</b>", "A&B", 1.0, "u", 0.0, 10.0)], 10.0, system)
    assert "<b>x</b>" not in page
    assert "&lt;b&gt;x&lt;/b&gt;" in page
    assert "A&amp;B" in page


def test_csv_round_trip(results):
    text = render_csv(results)
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == ["Test Name", "Category", "Value", "Unit", "Duration (ms)", "Score"]
    assert len(rows) == len(results) + 1
    for row, result in zip(rows[1:], results):
        assert row[0] == result.name
        assert row[1] == result.category
        assert float(row[2]) == pytest.approx(result.value)
        assert row[3] == result.unit
        assert float(row[4]) == pytest.approx(result.duration)
        assert float(row[5]) == pytest.approx(result.score)


def test_csv_quotes_embedded_quotes():
    text = render_csv([BenchmarkResult('say "hi"', "C", 1.0, "u", 0.0, 1.0)])
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1][0] == 'say "hi"'


def test_history_json_round_trip(results):
    when = datetime(2024, 1, 2, 3, 4, 5)
    document = json.loads(render_history_json(results, 81.5, when))
    assert document["timestamp"] == int(when.timestamp())
    assert document["overall_score"] == pytest.approx(81.5)
    assert [r["name"] for r in document["results"]] == [r.name for r in results]
    assert [r["score"] for r in document["results"]] == [r.score for r in results]
    assert "2024" in document["date"]


def test_history_filename():
    assert history_filename(datetime(2024, 1, 2, 3, 4, 5)) == "benchmark_20240102_030405.json"


@pytest.mark.parametrize("fmt,render", [("txt", None), ("html", None), ("csv", render_csv)])
def test_export_writes_file(tmp_path, results, system, fmt, render):
    path = export(results, 80.0, fmt, tmp_path, system)
    assert path.name == f"VeniceDAW_Benchmark_Results.{fmt}"
    content = path.read_text(encoding="utf-8")
    if render is not None:
        assert content == render(results)
    else:
        assert "Memory Bandwidth" in content


def test_export_html_matches_render(tmp_path, results, system):
    path = export(results, 80.0, "HTML", tmp_path, system)
    assert path.read_text(encoding="utf-8") == render_html(results, 80.0, system)


def test_export_rejects_unknown_format(tmp_path, results, system):
    with pytest.raises(ValueError):
        export(results, 80.0, "pdf", tmp_path, system)


def test_save_and_list_history(tmp_path, results):
    older = datetime(2024, 1, 2, 3, 4, 5)
    newer = datetime(2024, 3, 4, 5, 6, 7)
    path = save_history(results, 70.0, tmp_path, older)
    save_history(results, 75.0, tmp_path, newer)
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "benchmark_garbage.json").write_text("x")
    assert path.name == history_filename(older)
    assert json.loads(path.read_text(encoding="utf-8"))["overall_score"] == pytest.approx(70.0)
    assert list_history(tmp_path, 5) == [newer, older]
    assert list_history(tmp_path, 1) == [newer]


def test_list_history_missing_directory(tmp_path):
    assert list_history(tmp_path / "absent", 5) == []