from collections import Counter
from typing import List

import pytest

from omikuji.core.errors import InvalidInputError
from omikuji.services.random_source import RandomSource, SeededRandomSource
from omikuji.services.weighted_selector import check_distribution, cumulative_probabilities, select


class ScriptedSource(RandomSource):
    """Returns the given values in order, repeating the last one."""

    def __init__(self, values: List[float]):
        self.values = list(values)

    def next(self) -> float:
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


def test_always_returns_a_member() -> None:
    source = SeededRandomSource("members")
    cases = [
        (["only"], [3]),
        (["a", "b"], [1, 1]),
        (["a", "b", "c", "d"], [0.1, 5, 0.0001, 2]),
        ([1, 2, 3], [0, 0, 7]),
    ]
    for items, weights in cases:
        for _ in range(200):
            assert select(items, weights, source) in items


def test_frequencies_converge_to_weights() -> None:
    items = ["a", "b", "c"]
    source = SeededRandomSource("convergence")
    counts = Counter(select(items, [0.5, 0.3, 0.2], source) for _ in range(10000))

    assert counts["a"] / 10000 == pytest.approx(0.5, abs=0.05)
    assert counts["b"] / 10000 == pytest.approx(0.3, abs=0.05)
    assert counts["c"] / 10000 == pytest.approx(0.2, abs=0.05)


@pytest.mark.parametrize("weights", [[0, 1, 1], [1, 0, 1], [1, 1, 0]])
def test_zero_weight_item_is_never_selected(weights) -> None:
    items = ["a", "b", "c"]
    excluded = items[weights.index(0)]
    source = SeededRandomSource("zero-weight")

    picks = {select(items, weights, source) for _ in range(1000)}

    assert excluded not in picks


def test_dominant_weight_wins_almost_always() -> None:
    source = SeededRandomSource("extreme")
    counts = Counter(select(["x", "y", "z"], [0.999, 0.0005, 0.0005], source) for _ in range(1000))

    assert counts["x"] >= 990


def test_scan_prefers_earlier_item_below_boundary() -> None:
    assert select(["a", "b"], [1, 1], ScriptedSource([0.0])) == "a"
    assert select(["a", "b"], [1, 1], ScriptedSource([0.4999])) == "a"
    assert select(["a", "b"], [1, 1], ScriptedSource([0.5])) == "b"


def test_falls_back_to_last_item_when_r_exceeds_every_bound() -> None:
    assert select(["a", "b", "c"], [1, 2, 3], ScriptedSource([1.0])) == "c"


def test_fallback_skips_trailing_zero_weight_items() -> None:
    assert select(["a", "b", "c"], [1, 1, 0], ScriptedSource([1.0])) == "b"


def test_length_mismatch_is_rejected() -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        select(["a", "b"], [1], SeededRandomSource("s"))
    assert exc_info.value.code == "selector_length_mismatch"


def test_empty_items_are_rejected() -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        select([], [], SeededRandomSource("s"))
    assert exc_info.value.code == "selector_empty"


@pytest.mark.parametrize("weights", [[0, 0], [-1, 0.5]])
def test_non_positive_total_is_rejected(weights) -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        select(["a", "b"], weights, SeededRandomSource("s"))
    assert exc_info.value.code == "selector_non_positive_total"


@pytest.mark.parametrize("bad_weight", [float("nan"), float("inf"), float("-inf"), "x", None, True])
def test_non_finite_or_non_numeric_weight_is_rejected(bad_weight) -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        select(["a", "b"], [1.0, bad_weight], SeededRandomSource("s"))
    assert exc_info.value.code == "selector_invalid_weight"


def test_cumulative_probabilities_are_normalized() -> None:
    assert cumulative_probabilities([5, 3, 2]) == pytest.approx([0.5, 0.8, 1.0])
    assert cumulative_probabilities([2, 0, 2]) == pytest.approx([0.5, 0.5, 1.0])


def test_check_distribution_reports_deviation() -> None:
    report = check_distribution(["a", "b", "c"], [5, 3, 2], SeededRandomSource("report"), samples=10000)

    assert report.samples == 10000
    assert report.expected == pytest.approx({"a": 0.5, "b": 0.3, "c": 0.2})
    assert sum(report.observed.values()) == pytest.approx(1.0)
    assert report.within_tolerance
    assert all(abs(deviation) <= 0.05 for deviation in report.deviations.values())


def test_check_distribution_flags_out_of_tolerance() -> None:
    # Source pinned to 0.0 always picks "a", far from its 50% share.
    report = check_distribution(["a", "b"], [1, 1], ScriptedSource([0.0]), samples=100)

    assert report.observed == {"a": 1.0, "b": 0.0}
    assert not report.within_tolerance


def test_check_distribution_requires_samples() -> None:
    with pytest.raises(InvalidInputError):
        check_distribution(["a"], [1], SeededRandomSource("s"), samples=0)
