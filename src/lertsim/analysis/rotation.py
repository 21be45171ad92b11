"""
Verify the round-robin invariants of one level by brute force.

The engine answers bin queries in O(1); this module replays a whole
period through it and checks what the closed forms promise:
1. Every bin flushes exactly once per period
2. At most one bin flushes per step, exactly one on each r^j cadence slot
3. States repeat with the level's period once it is active
4. No bin flushes before it has been touched
5. Filling fractions stay in [0, 1)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lertsim.core.state import BinKind

if TYPE_CHECKING:
    from lertsim.core.engine import ScheduleEngine


@dataclass
class RotationResult:
    """Outcome of verify_level() for one level."""

    level: int
    period: int
    first_flush: int

    # Bin flushing at each cadence slot of one period, starting at first_flush
    flush_order: list[int] = field(default_factory=list)

    each_bin_once: bool = False
    single_flusher: bool = False
    flushes_on_cadence: bool = False
    periodic: bool = False
    touch_before_flush: bool = False
    fractions_in_bounds: bool = False

    @property
    def ok(self) -> bool:
        """True if every invariant holds."""
        return (
            self.each_bin_once
            and self.single_flusher
            and self.flushes_on_cadence
            and self.periodic
            and self.touch_before_flush
            and self.fractions_in_bounds
        )


def flushers_at(
    engine: "ScheduleEngine", level: int, timestep: int, partial_fill: bool = False
) -> list[int]:
    """Indices of all bins of `level` reporting Flushing at `timestep`."""
    return [
        i
        for i, state in enumerate(engine.level_states(level, timestep, partial_fill))
        if state.kind is BinKind.FLUSHING
    ]


def verify_level(
    engine: "ScheduleEngine",
    level: int,
    partial_fill: bool = False,
    max_steps: int = 100_000,
) -> RotationResult:
    """
    Replay one full period of `level` and check its invariants.

    Args:
        engine: Schedule engine to verify
        level: Level to check
        partial_fill: Whether to evaluate with fractional fill enabled
        max_steps: Refuse levels whose period exceeds this many steps

    Returns:
        RotationResult with one flag per invariant
    """
    period = engine.period(level)
    if period > max_steps:
        raise ValueError(f"period {period} of level {level} exceeds max_steps={max_steps}")

    ff = engine.first_flush(level)
    cadence = engine.flush_cadence(level)
    num_bins = engine.config.num_bins
    result = RotationResult(level=level, period=period, first_flush=ff)

    flush_counts = [0] * num_bins
    single = True
    on_cadence = True
    periodic = True
    fractions_ok = True

    for t in range(ff, ff + period):
        now = engine.level_states(level, t, partial_fill)
        later = engine.level_states(level, t + period, partial_fill)
        if now != later:
            periodic = False

        flushing = [i for i, s in enumerate(now) if s.kind is BinKind.FLUSHING]
        for i in flushing:
            flush_counts[i] += 1
        if len(flushing) > 1:
            single = False

        slot = (t - ff) % cadence == 0
        if slot:
            if len(flushing) == 1:
                result.flush_order.append(flushing[0])
            else:
                on_cadence = False
        elif flushing:
            on_cadence = False

        for s in now:
            if s.kind is BinKind.FILLING and not 0.0 <= s.fraction < 1.0:
                fractions_ok = False

    result.each_bin_once = flush_counts == [1] * num_bins
    result.single_flusher = single
    result.flushes_on_cadence = on_cadence
    result.periodic = periodic
    result.fractions_in_bounds = fractions_ok
    result.touch_before_flush = all(
        engine.touch_step(level, i) <= engine.first_flush_occurrence(level, i)
        for i in range(num_bins)
    )
    return result


def verify_schedule(
    engine: "ScheduleEngine",
    partial_fill: bool = False,
    max_level: int | None = None,
    max_steps: int = 100_000,
) -> list[RotationResult]:
    """Run verify_level() for levels 0 .. max_level (default: config.depth)."""
    last = engine.config.depth if max_level is None else max_level
    return [
        verify_level(engine, level, partial_fill, max_steps)
        for level in range(last + 1)
    ]
