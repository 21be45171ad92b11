"""
Core schedule primitives.

This layer knows NOTHING about rendering, colors or animation loops.
It only knows:
- The four tunable parameters and the constants derived from them
- Which bin of which level flushes at which logical step
- How full a bin is between flushes

Two entry points:
- resolve_configuration(): M, D, r, α → ScheduleConfig (depth, num_bins)
- status(): (config, level, bin, step) → BinState
"""

from lertsim.core.errors import ScheduleError, InvalidConfiguration, OutOfRange, ArithmeticOverflow
from lertsim.core.config import ScheduleConfig, resolve_configuration, literal_depth, intended_depth
from lertsim.core.state import BinKind, BinState, KIND_CODES
from lertsim.core.engine import ScheduleEngine, engine_for, status

__all__ = [
    "ScheduleError",
    "InvalidConfiguration",
    "OutOfRange",
    "ArithmeticOverflow",
    "ScheduleConfig",
    "resolve_configuration",
    "literal_depth",
    "intended_depth",
    "BinKind",
    "BinState",
    "KIND_CODES",
    "ScheduleEngine",
    "engine_for",
    "status",
]
