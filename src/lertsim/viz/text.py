"""
Plain-text rendering of a schedule step.

One row per level, framed by dashed rules, one glyph per bin:

    ---------
      x   v
    ---------
      :
    ---------

Glyphs: Empty ' ', Full 'x', Flushing 'v' and Filling a ramp from '.'
(just started) to '*' (nearly full).
"""

from __future__ import annotations
from typing import Sequence

from lertsim.core.state import BinKind, BinState

GLYPH_EMPTY = " "
GLYPH_FULL = "x"
GLYPH_FLUSHING = "v"
FILL_RAMP = ".:-=+*"


def glyph_for(state: BinState) -> str:
    """Single character for a bin state."""
    if state.kind is BinKind.EMPTY:
        return GLYPH_EMPTY
    if state.kind is BinKind.FULL:
        return GLYPH_FULL
    if state.kind is BinKind.FLUSHING:
        return GLYPH_FLUSHING
    return FILL_RAMP[int(state.fraction * len(FILL_RAMP))]


def render_row(states: Sequence[BinState]) -> str:
    """Glyphs of one level, each bin in a 4-character cell."""
    return "".join(f"  {glyph_for(s)} " for s in states).rstrip()


def render_text(
    rows: Sequence[Sequence[BinState]],
    timestep: int | None = None,
) -> str:
    """
    Render levels (as returned by ScheduleEngine.states) as a text grid.

    Args:
        rows: One sequence of BinState per level, top level first
        timestep: Optional step number for a header line

    Returns:
        Multi-line string (no trailing newline)
    """
    num_bins = max((len(r) for r in rows), default=0)
    rule = "-" * (4 * num_bins + 2)

    lines = []
    if timestep is not None:
        lines.append(f"t = {timestep}")
    for row in rows:
        lines.append(rule)
        lines.append(render_row(row))
    lines.append(rule)
    return "\n".join(lines)
