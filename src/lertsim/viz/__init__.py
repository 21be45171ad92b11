"""
Visualization utilities.

- Text grid of one step (terminal rendering)
- Snapshot heatmaps (levels × bins)
- Timeline heatmaps (steps × bins for one level)
"""

from lertsim.viz.text import (
    glyph_for,
    render_row,
    render_text,
)

from lertsim.viz.grid import (
    CMAP_FILL,
    plot_snapshot,
    plot_timeline,
    plot_schedule_summary,
    save_figure,
)

__all__ = [
    "glyph_for",
    "render_row",
    "render_text",
    "CMAP_FILL",
    "plot_snapshot",
    "plot_timeline",
    "plot_schedule_summary",
    "save_figure",
]
