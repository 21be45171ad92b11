"""
Snapshots: bin states as numpy grids.

Renderers want arrays, not nested lists of BinState:
- kinds: integer code per bin (see KIND_CODES)
- fill: 0..1 intensity per bin (Empty 0, Filling f, Full/Flushing 1)

Two shapes are provided:
- ScheduleSnapshot: every level at one step, [n_levels, num_bins]
- LevelTimeline: one level over a range of steps, [n_steps, num_bins]
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lertsim.core.state import KIND_CODES, BinKind

if TYPE_CHECKING:
    from lertsim.core.engine import ScheduleEngine

FLUSHING_CODE = KIND_CODES[BinKind.FLUSHING]


@dataclass
class ScheduleSnapshot:
    """State of every (level, bin) at a single step."""

    timestep: int
    kinds: np.ndarray  # [n_levels, num_bins] int8 codes
    fill: np.ndarray   # [n_levels, num_bins] float64 in [0, 1]

    @property
    def shape(self) -> tuple[int, int]:
        """(n_levels, num_bins)."""
        return self.kinds.shape

    def flushing_mask(self) -> np.ndarray:
        """Bool array, True where a bin flushes this step."""
        return self.kinds == FLUSHING_CODE

    def flushing_bins(self) -> dict[int, int]:
        """Map level → index of the bin flushing this step (levels with a flush only)."""
        levels, bins = np.nonzero(self.flushing_mask())
        return {int(j): int(i) for j, i in zip(levels, bins)}


@dataclass
class LevelTimeline:
    """State of every bin of one level across consecutive steps."""

    level: int
    steps: np.ndarray  # [n_steps] int64
    kinds: np.ndarray  # [n_steps, num_bins] int8 codes
    fill: np.ndarray   # [n_steps, num_bins] float64 in [0, 1]

    def flush_counts(self) -> np.ndarray:
        """Number of flushes per bin over the timeline, shape [num_bins]."""
        return (self.kinds == FLUSHING_CODE).sum(axis=0)


def take_snapshot(
    engine: "ScheduleEngine",
    timestep: int,
    partial_fill: bool = False,
    max_level: int | None = None,
) -> ScheduleSnapshot:
    """
    Evaluate every bin of every level at `timestep`.

    Args:
        engine: Schedule engine to query
        timestep: Logical step
        partial_fill: Report fractional fill for levels > 0
        max_level: Last level to include (default: config.depth)

    Returns:
        ScheduleSnapshot with [n_levels, num_bins] arrays
    """
    rows = engine.states(timestep, partial_fill, max_level=max_level)
    n_levels, num_bins = len(rows), engine.config.num_bins

    kinds = np.zeros((n_levels, num_bins), dtype=np.int8)
    fill = np.zeros((n_levels, num_bins), dtype=np.float64)
    for j, row in enumerate(rows):
        for i, state in enumerate(row):
            kinds[j, i] = KIND_CODES[state.kind]
            fill[j, i] = state.fill_level

    return ScheduleSnapshot(timestep=timestep, kinds=kinds, fill=fill)


def level_timeline(
    engine: "ScheduleEngine",
    level: int,
    start: int,
    n_steps: int,
    partial_fill: bool = False,
) -> LevelTimeline:
    """
    Evaluate every bin of `level` for steps start .. start + n_steps - 1.

    Raises:
        ValueError: if start is negative or n_steps < 1
    """
    if start < 0:
        raise ValueError(f"start must be non-negative, got {start}")
    if n_steps < 1:
        raise ValueError(f"n_steps must be >= 1, got {n_steps}")

    num_bins = engine.config.num_bins
    steps = np.arange(start, start + n_steps, dtype=np.int64)
    kinds = np.zeros((n_steps, num_bins), dtype=np.int8)
    fill = np.zeros((n_steps, num_bins), dtype=np.float64)

    for row, t in enumerate(range(start, start + n_steps)):
        for i, state in enumerate(engine.level_states(level, t, partial_fill)):
            kinds[row, i] = KIND_CODES[state.kind]
            fill[row, i] = state.fill_level

    return LevelTimeline(level=level, steps=steps, kinds=kinds, fill=fill)
