"""
Bin states reported by the schedule engine.

A bin is stateless: its state is a pure function of (level, index, step).
BinState is the value the engine hands to renderers.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class BinKind(Enum):
    """What a bin is doing at a given step."""

    EMPTY = "empty"          # Nothing written yet
    FILLING = "filling"      # Receiving flushes from the level above
    FULL = "full"            # Holds data, not flushing this step
    FLUSHING = "flushing"    # Empties into the next level this step


@dataclass(frozen=True)
class BinState:
    """
    State of one bin at one step.

    `fraction` is only meaningful for FILLING and lies in [0, 1).
    """

    kind: BinKind
    fraction: float = 0.0

    def __post_init__(self):
        if self.kind is BinKind.FILLING:
            if not 0.0 <= self.fraction < 1.0:
                raise ValueError(f"Filling fraction must be in [0, 1), got {self.fraction}")
        elif self.fraction != 0.0:
            raise ValueError(f"{self.kind.name} carries no fraction, got {self.fraction}")

    @classmethod
    def empty(cls) -> BinState:
        return cls(BinKind.EMPTY)

    @classmethod
    def filling(cls, fraction: float) -> BinState:
        return cls(BinKind.FILLING, float(fraction))

    @classmethod
    def full(cls) -> BinState:
        return cls(BinKind.FULL)

    @classmethod
    def flushing(cls) -> BinState:
        return cls(BinKind.FLUSHING)

    @property
    def fill_level(self) -> float:
        """Intensity for renderers: 0 when empty, 1 when full or flushing."""
        if self.kind is BinKind.EMPTY:
            return 0.0
        if self.kind is BinKind.FILLING:
            return self.fraction
        return 1.0

    def __str__(self) -> str:
        if self.kind is BinKind.FILLING:
            return f"Filling({self.fraction:g})"
        return self.kind.name.capitalize()


# Integer codes for numpy snapshots (see lertsim.analysis.snapshot)
KIND_CODES: dict[BinKind, int] = {
    BinKind.EMPTY: 0,
    BinKind.FILLING: 1,
    BinKind.FULL: 2,
    BinKind.FLUSHING: 3,
}
