"""
Breakpoint tables for thermal derating and voltage curves.

Every curve is an ordered list of bands. A value is matched against the bands
from the lowest upper bound to the highest, so a boundary value always lands
in exactly one band.
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Band:
    """A band ending at ``upper`` (inclusive or exclusive) with a multiplier."""
    upper: float
    factor: float
    inclusive: bool = False

    def contains(self, value: float) -> bool:
        if self.inclusive:
            return value <= self.upper
        return value < self.upper


def below(upper: float, factor: float) -> Band:
    """Band covering values strictly below ``upper``."""
    return Band(upper=upper, factor=factor, inclusive=False)


def up_to(upper: float, factor: float) -> Band:
    """Band covering values up to and including ``upper``."""
    return Band(upper=upper, factor=factor, inclusive=True)


class StepTable:
    """
    Monotone lookup over sorted bands.

    Values above the last band map to ``above``.
    """

    def __init__(self, bands: Sequence[Band], above: float):
        uppers = [band.upper for band in bands]
        if uppers != sorted(uppers):
            raise ValueError("Bands must be sorted by upper bound")
        self.bands = tuple(bands)
        self.above = above

    def __call__(self, value: float) -> float:
        for band in self.bands:
            if band.contains(value):
                return band.factor
        return self.above

    def breakpoints(self):
        """(upper, factor) pairs followed by the open-ended factor."""
        return [(band.upper, band.factor) for band in self.bands] + [(float("inf"), self.above)]


# --- Motor ---
MOTOR_EFFICIENCY_FACTOR = StepTable(
    [below(0.0, 0.9), up_to(60.0, 1.0), up_to(80.0, 0.95)],
    above=0.9,
)
MOTOR_THERMAL_LIMIT = StepTable(
    [up_to(60.0, 1.0), up_to(80.0, 0.8), up_to(100.0, 0.5)],
    above=0.3,
)

# --- Controller ---
CONTROLLER_THERMAL_FACTOR = StepTable(
    [up_to(60.0, 1.0), up_to(70.0, 0.8), up_to(80.0, 0.6)],
    above=0.4,
)

# --- Battery ---
# Cold and heat both cost capacity; 20..30 °C is the full-capacity band
BATTERY_CAPACITY_FACTOR = StepTable(
    [
        below(-20.0, 0.3),
        below(-10.0, 0.4),
        below(0.0, 0.5),
        below(10.0, 0.7),
        below(20.0, 0.85),
        up_to(30.0, 1.0),
        up_to(40.0, 0.9),
        up_to(50.0, 0.7),
    ],
    above=0.5,
)
BATTERY_RESISTANCE_FACTOR = StepTable(
    [
        below(-10.0, 3.0),
        below(0.0, 2.0),
        below(10.0, 1.5),
        up_to(30.0, 1.0),
        up_to(40.0, 1.2),
    ],
    above=1.5,
)
BATTERY_DISCHARGE_FACTOR = StepTable(
    [
        below(-10.0, 0.3),
        below(0.0, 0.5),
        below(10.0, 0.7),
        up_to(35.0, 1.0),
        up_to(45.0, 0.8),
    ],
    above=0.5,
)
# Keyed by charge / effective capacity
BATTERY_OCV_FACTOR = StepTable(
    [
        up_to(0.1, 0.85),
        up_to(0.3, 0.9),
        up_to(0.5, 0.95),
        up_to(0.7, 1.0),
        up_to(0.9, 1.05),
    ],
    above=1.1,
)
