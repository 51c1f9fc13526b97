import pytest

from venicebench.results import (
    BenchmarkResult,
    BenchmarkSession,
    best_result,
    category_averages,
    group_by_category,
    overall_score,
    rating_for,
)


def _result(name, category, score):
    return BenchmarkResult(name=name, category=category, value=1.0, unit="ms", score=score)


@pytest.mark.parametrize(
    "score, expected",
    [
        (100.0, "EXCELLENT"),
        (90.0, "EXCELLENT"),
        (89.9, "VERY GOOD"),
        (75.0, "VERY GOOD"),
        (60.0, "GOOD"),
        (59.9, "FAIR"),
        (45.0, "FAIR"),
        (44.9, "NEEDS IMPROVEMENT"),
        (0.0, "NEEDS IMPROVEMENT"),
    ],
)
def test_rating_bands(score, expected):
    assert rating_for(score) == expected


def test_overall_score_empty_is_zero():
    assert overall_score([]) == 0.0


def test_overall_score_single_result_is_its_score():
    assert overall_score([_result("a", "Memory", 42.5)]) == 42.5


def test_overall_score_between_min_and_max():
    results = [_result("a", "Memory", 20.0), _result("b", "CPU", 70.0), _result("c", "CPU", 35.0)]
    score = overall_score(results)
    assert 20.0 <= score <= 70.0
    assert score * len(results) == pytest.approx(sum(r.score for r in results))


def test_group_by_category_sorted_and_keeps_order():
    first = _result("first", "Memory", 10.0)
    second = _result("second", "Audio Processing", 20.0)
    third = _result("third", "Memory", 30.0)
    groups = group_by_category([first, second, third])
    assert list(groups) == ["Audio Processing", "Memory"]
    assert groups["Memory"] == [first, third]
    assert groups["Audio Processing"] == [second]


def test_category_averages_match_group_means():
    results = [
        _result("a", "CPU", 40.0),
        _result("b", "CPU", 40.0),
        _result("c", "Audio Processing", 55.0),
    ]
    averages = category_averages(results)
    assert list(averages) == ["Audio Processing", "CPU"]
    assert averages["CPU"] == 40.0
    assert averages["Audio Processing"] == 55.0


def test_category_averages_empty():
    assert category_averages([]) == {}


def test_best_result_picks_first_highest():
    low = _result("low", "CPU", 10.0)
    high = _result("high", "Memory", 80.0)
    tie = _result("tie", "Memory", 80.0)
    assert best_result([low, high, tie]) is high


def test_best_result_none_when_nothing_positive():
    assert best_result([_result("zero", "CPU", 0.0)]) is None
    assert best_result([]) is None


def test_session_add_and_finalize():
    session = BenchmarkSession()
    session.add(_result("a", "CPU", 30.0))
    session.add(_result("b", "CPU", 30.0))
    assert len(session) == 2
    assert session.finalize() == 30.0
    assert session.total_score == 30.0


def test_session_finalize_empty_keeps_previous_total():
    session = BenchmarkSession(total_score=12.0)
    assert session.finalize() == 12.0
    assert session.total_score == 12.0


def test_session_clear_resets():
    session = BenchmarkSession()
    session.add(_result("a", "Memory", 50.0))
    session.finalize()
    session.clear()
    assert session.results == []
    assert session.total_score == 0.0
    assert list(session) == []


def test_result_defaults():
    result = BenchmarkResult(name="n", category="c")
    assert (result.value, result.unit, result.duration, result.score) == (0.0, "", 0.0, 0.0)