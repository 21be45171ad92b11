"""
Schedule Engine: state of bin (level, index) at logical step t.

Each level j is a ring of c bins with period r^j · c. Bins flush one at a
time in a fixed rotation, so a level's flush work is spread across its
whole period instead of bursting.

Per level:
- period(j) = r^j · c
- first_flush(0) = c - 1
- first_flush(j) = r^j · c - 1 + Σ_{k<j} r^k · (c - 1)

A level cannot start flushing until every level above it has finished
its own warm-up cascade, which is what the sum accumulates.

Per bin (j, i):
- touch_step: first step at which the bin receives writes
- flush_step: its phase within the level's period
- next_bin_flush_step: phase of the next bin in rotation, which bounds
  this bin's filling window

The engine holds no mutable state beyond a per-level cache of
first_flush, so it is safe to share between threads.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from functools import lru_cache

from lertsim.core.checked import add_mod, checked_add, checked_mul, checked_pow, is_int, word_max
from lertsim.core.config import ScheduleConfig
from lertsim.core.errors import OutOfRange
from lertsim.core.state import BinState

logger = logging.getLogger(__name__)


@dataclass
class ScheduleEngine:
    """
    Answers "what is bin (level, index) doing at step t?".

    Every public method validates its arguments and raises OutOfRange for
    levels, bins or steps that do not exist, and ArithmeticOverflow when a
    value does not fit in config.word_bits.
    """

    config: ScheduleConfig

    # first_flush(j) and Σ_{k<j} r^k (c-1), filled in level order
    _first_flush: dict[int, int] = field(default_factory=dict, init=False, repr=False)
    _tail: dict[int, int] = field(default_factory=dict, init=False, repr=False)
    _cached_upto: int = field(default=-1, init=False, repr=False)

    def __post_init__(self):
        self._tail[0] = 0

    # ───────────────────────────────────────────────────────────────
    # Level constants
    # ───────────────────────────────────────────────────────────────

    def period(self, level: int) -> int:
        """Steps between successive flushes of the same bin at `level`."""
        self._check_level(level)
        return self._period(level)

    def first_flush(self, level: int) -> int:
        """First global step at which any bin of `level` flushes."""
        self._check_level(level)
        return self._first_flush_of(level)

    def flush_cadence(self, level: int) -> int:
        """Steps between consecutive flushes of different bins at `level` (r^level)."""
        self._check_level(level)
        return self._power(level)

    # ───────────────────────────────────────────────────────────────
    # Bin constants
    # ───────────────────────────────────────────────────────────────

    def touch_step(self, level: int, bin_index: int) -> int:
        """First step at which bin (level, bin_index) starts receiving writes."""
        self._check_bin(level, bin_index)
        return self._touch_step(level, bin_index)

    def flush_step(self, level: int, bin_index: int) -> int:
        """Phase within the level's period at which the bin flushes."""
        self._check_bin(level, bin_index)
        return self._flush_step(level, bin_index)

    def next_bin_flush_step(self, level: int, bin_index: int) -> int:
        """Flush phase of the bin after `bin_index` in rotation order."""
        self._check_bin(level, bin_index)
        return self._flush_step(level, bin_index + 1)

    def first_flush_occurrence(self, level: int, bin_index: int) -> int:
        """Absolute step of the bin's first flush."""
        self._check_bin(level, bin_index)
        period = self._period(level)
        ff = self._first_flush_of(level)
        lag = add_mod(self._flush_step(level, bin_index), (period - ff % period) % period, period)
        return checked_add(ff, lag, self.config.word_bits)

    # ───────────────────────────────────────────────────────────────
    # Queries
    # ───────────────────────────────────────────────────────────────

    def status(
        self,
        level: int,
        bin_index: int,
        timestep: int,
        partial_fill_enabled: bool = False,
    ) -> BinState:
        """
        State of bin (level, bin_index) at `timestep`.

        Args:
            level: 0 (top) to config.depth (bottom)
            bin_index: 0 to config.num_bins - 1
            timestep: Any non-negative logical step, including steps before
                the level becomes active
            partial_fill_enabled: Report Filling(fraction) for levels > 0
                instead of collapsing it to Full

        Returns:
            BinState (Empty, Filling, Full or Flushing)
        """
        self._check_bin(level, bin_index)
        self._check_timestep(timestep)
        timestep = int(timestep)

        period = self._period(level)
        flush = self._flush_step(level, bin_index)
        is_turn = timestep % period == flush
        level_active = timestep >= self._first_flush_of(level)

        if is_turn and level_active:
            return BinState.flushing()
        if timestep < self._touch_step(level, bin_index):
            return BinState.empty()
        if partial_fill_enabled and level > 0:
            fraction = self._fill_fraction(level, bin_index, timestep)
            if fraction is not None:
                return BinState.filling(fraction)
        return BinState.full()

    def flushing_bin(self, level: int, timestep: int) -> int | None:
        """Index of the bin flushing at `timestep`, or None if no bin flushes."""
        self._check_level(level)
        self._check_timestep(timestep)
        timestep = int(timestep)

        ff = self._first_flush_of(level)
        if timestep < ff:
            return None
        offset = (timestep - ff) % self._period(level)
        cadence = self._power(level)
        if offset % cadence:
            return None
        return offset // cadence

    def level_states(
        self, level: int, timestep: int, partial_fill_enabled: bool = False
    ) -> list[BinState]:
        """States of every bin of `level` at `timestep`, in index order."""
        return [
            self.status(level, i, timestep, partial_fill_enabled)
            for i in range(self.config.num_bins)
        ]

    def states(
        self,
        timestep: int,
        partial_fill_enabled: bool = False,
        max_level: int | None = None,
    ) -> list[list[BinState]]:
        """
        States of every (level, bin) at `timestep`, one row per level.

        Args:
            max_level: Stop at this level instead of config.depth. Literal
                depths can be far deeper than the word width allows.
        """
        last = self.config.depth if max_level is None else max_level
        self._check_level(last)
        return [
            self.level_states(level, timestep, partial_fill_enabled)
            for level in range(last + 1)
        ]

    # ───────────────────────────────────────────────────────────────
    # Internals (arguments already validated)
    # ───────────────────────────────────────────────────────────────

    def _power(self, level: int) -> int:
        return checked_pow(self.config.expansion_factor, level, self.config.word_bits)

    def _period(self, level: int) -> int:
        return checked_mul(self._power(level), self.config.num_bins, self.config.word_bits)

    def _first_flush_of(self, level: int) -> int:
        cached = self._first_flush.get(level)
        if cached is not None:
            return cached

        bits = self.config.word_bits
        c = self.config.num_bins
        start = max(0, min(self._cached_upto, level))
        tail = self._tail[start]
        for j in range(start, level + 1):
            power = self._power(j)
            ff = checked_add(checked_mul(power, c, bits) - 1, tail, bits)
            self._first_flush[j] = ff
            tail = checked_add(tail, checked_mul(power, c - 1, bits), bits)
            self._tail[j + 1] = tail
            self._cached_upto = max(self._cached_upto, j)

        logger.debug("first_flush cached up to level %d", level)
        return self._first_flush[level]

    def _touch_step(self, level: int, bin_index: int) -> int:
        # (r^j (c + i)) mod period == r^j · i since i < c
        zeroth_flush = self._first_flush_of(level - 1) if level > 0 else 0
        offset = checked_mul(self._power(level), bin_index, self.config.word_bits)
        return checked_add(offset, zeroth_flush, self.config.word_bits)

    def _flush_step(self, level: int, bin_index: int) -> int:
        # (r^j (c + i) + first_flush(j)) mod period; bin_index may be c
        period = self._period(level)
        phase = (self._power(level) * bin_index) % period
        return add_mod(phase, self._first_flush_of(level) % period, period)

    def _fill_fraction(self, level: int, bin_index: int, timestep: int) -> float | None:
        """
        Fraction filled inside the bin's filling window, None outside it.

        Phases are shifted so the level's zeroth flush sits at 0. The last
        bin has no successor, so its window runs to the end of the period.
        """
        r = self.config.expansion_factor
        period = self._period(level)
        zeroth_flush = self._first_flush_of(level - 1)
        touch_mod = period - zeroth_flush % period

        def shifted(step: int) -> int:
            return add_mod(step % period, touch_mod % period, period)

        shifted_t = shifted(timestep)
        shifted_flush = shifted(self._flush_step(level, bin_index))

        if bin_index == self.config.num_bins - 1:
            in_window = shifted_t > shifted_flush
        else:
            shifted_next = shifted(self._flush_step(level, bin_index + 1))
            in_window = shifted_flush < shifted_t < shifted_next
        if not in_window:
            return None

        bin_size = self._power(level)
        steps_since_flush = add_mod(
            shifted_t % bin_size,
            (bin_size - shifted_flush % bin_size) % bin_size,
            bin_size,
        )
        return (steps_since_flush // self._power(level - 1)) / r

    def _check_level(self, level: int) -> None:
        if not is_int(level):
            raise OutOfRange(f"level must be an integer, got {level!r}")
        if not 0 <= level <= self.config.depth:
            raise OutOfRange(f"level {level} outside [0, {self.config.depth}]")

    def _check_bin(self, level: int, bin_index: int) -> None:
        self._check_level(level)
        if not is_int(bin_index):
            raise OutOfRange(f"bin_index must be an integer, got {bin_index!r}")
        if not 0 <= bin_index < self.config.num_bins:
            raise OutOfRange(f"bin_index {bin_index} outside [0, {self.config.num_bins})")

    def _check_timestep(self, timestep: int) -> None:
        if not is_int(timestep):
            raise OutOfRange(f"timestep must be an integer, got {timestep!r}")
        if not 0 <= timestep <= word_max(self.config.word_bits):
            raise OutOfRange(
                f"timestep {timestep} outside [0, 2**{self.config.word_bits} - 1]"
            )


@lru_cache(maxsize=32)
def engine_for(config: ScheduleConfig) -> ScheduleEngine:
    """Shared engine per configuration, so repeated status() calls reuse its cache."""
    return ScheduleEngine(config)


def status(
    config: ScheduleConfig,
    level: int,
    bin_index: int,
    timestep: int,
    partial_fill_enabled: bool = False,
) -> BinState:
    """State of bin (level, bin_index) at `timestep` under `config`."""
    return engine_for(config).status(level, bin_index, timestep, partial_fill_enabled)
