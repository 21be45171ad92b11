"""
Analysis layer: arrays and checks derived from the engine.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- take_snapshot / level_timeline: numpy grids of bin states
- verify_level / verify_schedule: brute-force check of rotation invariants
"""

from lertsim.analysis.snapshot import (
    ScheduleSnapshot,
    LevelTimeline,
    take_snapshot,
    level_timeline,
)
from lertsim.analysis.rotation import (
    RotationResult,
    flushers_at,
    verify_level,
    verify_schedule,
)

__all__ = [
    "ScheduleSnapshot",
    "LevelTimeline",
    "take_snapshot",
    "level_timeline",
    "RotationResult",
    "flushers_at",
    "verify_level",
    "verify_schedule",
]
