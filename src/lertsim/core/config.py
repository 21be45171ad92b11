"""
Configuration Resolver: tunable parameters → schedule constants.

Four knobs describe the buffering structure:
- M (memory_size): size of the fastest tier
- D (disk_size): size of the backing tier
- r (expansion_factor): fan-out between adjacent levels
- α (time_stretch): fraction of a level's rotation covered by one bin

From them we derive the only two constants the schedule needs:
- depth: number of levels below the top
- c (num_bins): bins per level, ceil(1/α) + 1

The "+1" bin means at least one bin per level is always settled rather
than actively filling, which absorbs rounding in the rotation.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Literal

from lertsim.core.checked import is_int, word_max
from lertsim.core.errors import ArithmeticOverflow, InvalidConfiguration

logger = logging.getLogger(__name__)

DepthMode = Literal["literal", "intended"]
DEPTH_MODES: tuple[str, ...] = ("literal", "intended")

DEFAULT_WORD_BITS = 64


def literal_depth(memory_size: int, disk_size: int, expansion_factor: int) -> int:
    """
    Depth as the formula is literally written: ceil(D / log_r(2M)).

    Standard precedence binds the logarithm to 2M only, so this grows
    linearly with D rather than logarithmically.
    """
    return math.ceil(disk_size / math.log(2 * memory_size, expansion_factor))


def intended_depth(memory_size: int, disk_size: int, expansion_factor: int) -> int:
    """
    Depth as ceil(log_r(D / 2M)), computed exactly.

    Returns the smallest d with 2M * r^d >= D, which avoids the float
    error of math.log near exact powers (log(1000, 10) < 3).
    """
    depth = 0
    capacity = 2 * memory_size
    while capacity < disk_size:
        capacity *= expansion_factor
        depth += 1
    return depth


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Immutable configuration for a cascading flush schedule.

    Build it with resolve_configuration(); depth and num_bins are derived
    in __post_init__ and never change afterwards.
    """

    memory_size: int       # M
    disk_size: int         # D (the depth formula assumes D > 2M)
    expansion_factor: int  # r
    time_stretch: float    # α in (0, 1]
    depth_mode: DepthMode = "literal"
    word_bits: int = DEFAULT_WORD_BITS  # Width used for overflow detection

    depth: int = field(init=False)
    num_bins: int = field(init=False)

    def __post_init__(self):
        _validate(self)
        if self.depth_mode == "literal":
            depth = literal_depth(self.memory_size, self.disk_size, self.expansion_factor)
        else:
            depth = intended_depth(self.memory_size, self.disk_size, self.expansion_factor)
        if depth < 1:
            raise InvalidConfiguration(
                f"depth={depth} (mode {self.depth_mode!r}) requires "
                f"disk_size > 2 * memory_size, got D={self.disk_size}, M={self.memory_size}"
            )
        # Frozen: bypass __setattr__ for the derived fields
        object.__setattr__(self, "depth", depth)
        object.__setattr__(self, "num_bins", _num_bins(self))

    @property
    def levels(self) -> range:
        """Level numbers from 0 (top) to depth (bottom), inclusive."""
        return range(self.depth + 1)

    def describe(self) -> dict:
        """Parameter block as shown to users: M, D, depth, r, alpha, c."""
        return {
            "M": self.memory_size,
            "D": self.disk_size,
            "depth": self.depth,
            "r": self.expansion_factor,
            "alpha": self.time_stretch,
            "c": self.num_bins,
        }

    def __str__(self) -> str:
        return "\n".join(f"{k} = {v}" for k, v in self.describe().items())


def _validate(cfg: ScheduleConfig) -> None:
    for name in ("memory_size", "disk_size", "expansion_factor", "word_bits"):
        value = getattr(cfg, name)
        if not is_int(value):
            raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")

    if cfg.memory_size <= 0:
        raise InvalidConfiguration(f"memory_size must be positive, got {cfg.memory_size}")
    if cfg.disk_size <= 0:
        raise InvalidConfiguration(f"disk_size must be positive, got {cfg.disk_size}")
    if cfg.expansion_factor < 2:
        # log base r is undefined for r = 1
        raise InvalidConfiguration(
            f"expansion_factor must be >= 2, got {cfg.expansion_factor}"
        )
    if (
        not isinstance(cfg.time_stretch, Real)
        or isinstance(cfg.time_stretch, bool)
        or not 0 < cfg.time_stretch <= 1
    ):
        raise InvalidConfiguration(
            f"time_stretch must be in (0, 1], got {cfg.time_stretch!r}"
        )
    if cfg.depth_mode not in DEPTH_MODES:
        raise InvalidConfiguration(
            f"depth_mode must be one of {DEPTH_MODES}, got {cfg.depth_mode!r}"
        )
    if cfg.word_bits < 8:
        raise InvalidConfiguration(f"word_bits must be >= 8, got {cfg.word_bits}")


def _num_bins(cfg: ScheduleConfig) -> int:
    # 1/α is inf for subnormal floats
    try:
        num_bins = math.ceil(1 / cfg.time_stretch) + 1
    except OverflowError:
        raise ArithmeticOverflow(
            f"num_bins for time_stretch={cfg.time_stretch!r} is unbounded"
        ) from None
    if num_bins > word_max(cfg.word_bits):
        raise ArithmeticOverflow(
            f"num_bins = {num_bins} does not fit in {cfg.word_bits} bits"
        )
    return num_bins


def resolve_configuration(
    memory_size: int,
    disk_size: int,
    expansion_factor: int,
    time_stretch: float,
    *,
    depth_mode: DepthMode = "literal",
    word_bits: int = DEFAULT_WORD_BITS,
) -> ScheduleConfig:
    """
    Resolve the four tunable parameters into a ScheduleConfig.

    Args:
        memory_size: M, must be > 0
        disk_size: D, must be > 0
        expansion_factor: r, must be >= 2
        time_stretch: α, must be in (0, 1]
        depth_mode: "literal" (default) or "intended" depth formula
        word_bits: Integer width for overflow detection

    Returns:
        Frozen ScheduleConfig carrying depth and num_bins

    Raises:
        InvalidConfiguration: if any bound is violated
        ArithmeticOverflow: if num_bins does not fit in word_bits
    """
    cfg = ScheduleConfig(
        memory_size=memory_size,
        disk_size=disk_size,
        expansion_factor=expansion_factor,
        time_stretch=time_stretch,
        depth_mode=depth_mode,
        word_bits=word_bits,
    )
    logger.debug(
        "Resolved M=%d D=%d r=%d alpha=%s -> depth=%d c=%d (%s)",
        cfg.memory_size, cfg.disk_size, cfg.expansion_factor,
        cfg.time_stretch, cfg.depth, cfg.num_bins, cfg.depth_mode,
    )
    return cfg
