# omikuji/services/weighted_selector.py

import math
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Sequence, TypeVar

from ..core.errors import InvalidInputError
from .random_source import RandomSource

T = TypeVar("T")


def _check_inputs(items: Sequence, weights: Sequence[float]) -> float:
    if len(items) != len(weights):
        raise InvalidInputError(
            f"Items and weights must have the same length ({len(items)} != {len(weights)})",
            code="selector_length_mismatch",
        )
    if len(items) == 0:
        raise InvalidInputError("Items must not be empty", code="selector_empty")
    for weight in weights:
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight):
            raise InvalidInputError(f"Weights must be finite numbers, got {weight!r}", code="selector_invalid_weight")

    total = sum(weights)
    if total <= 0:
        raise InvalidInputError(f"Total weight must be positive, got {total}", code="selector_non_positive_total")
    return total


def cumulative_probabilities(weights: Sequence[float]) -> List[float]:
    """
    Normalizes the weights by their total and returns the running sums.
    e.g. [5, 3, 2] -> [0.5, 0.8, 1.0]
    """
    total = sum(weights)
    cumulative = []
    running = 0.0
    for weight in weights:
        running += weight / total
        cumulative.append(running)
    return cumulative


def select(items: Sequence[T], weights: Sequence[float], source: RandomSource) -> T:
    """
    Picks one item with probability proportional to its weight.

    Items are scanned in input order and the first one whose cumulative
    probability exceeds r wins, so boundary ties resolve to the earlier item.
    Zero-weight items never win: their cumulative value equals the previous one.
    """
    _check_inputs(items, weights)
    cumulative = cumulative_probabilities(weights)

    r = source.next()
    for item, bound in zip(items, cumulative):
        if r < bound:
            return item

    # Float drift near r ~ 1.0 can leave r above every bound.
    for item, weight in zip(reversed(items), reversed(weights)):
        if weight > 0:
            return item
    return items[-1]


@dataclass
class DistributionReport:
    samples: int
    tolerance: float
    expected: Dict[Hashable, float] = field(default_factory=dict)
    observed: Dict[Hashable, float] = field(default_factory=dict)

    @property
    def deviations(self) -> Dict[Hashable, float]:
        return {key: self.observed.get(key, 0.0) - expected for key, expected in self.expected.items()}

    @property
    def within_tolerance(self) -> bool:
        return all(abs(deviation) <= self.tolerance for deviation in self.deviations.values())


def check_distribution(
    items: Sequence[Hashable],
    weights: Sequence[float],
    source: RandomSource,
    samples: int,
    tolerance: float = 0.05,
) -> DistributionReport:
    """Draws `samples` times and compares the empirical frequencies with the normalized weights."""
    if samples <= 0:
        raise InvalidInputError("Sample count must be positive", code="invalid_sample_count")
    total = _check_inputs(items, weights)

    counts: Dict[Hashable, int] = {item: 0 for item in items}
    for _ in range(samples):
        counts[select(items, weights, source)] += 1

    report = DistributionReport(samples=samples, tolerance=tolerance)
    for item, weight in zip(items, weights):
        report.expected[item] = report.expected.get(item, 0.0) + weight / total
        report.observed[item] = counts[item] / samples
    return report
