"""
Heatmaps of schedule snapshots and timelines.

- plot_snapshot: levels × bins at one step
- plot_timeline: steps × bins for one level
- plot_schedule_summary: snapshot next to a timeline

Cell color encodes fill (0 = empty, 1 = full); flushing bins are outlined
so they stand out from merely full ones.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from lertsim.analysis.snapshot import FLUSHING_CODE

if TYPE_CHECKING:
    from lertsim.analysis.snapshot import ScheduleSnapshot, LevelTimeline


def _create_fill_cmap():
    """Create a colormap from warm white (empty) to deep blue (full)."""
    from matplotlib.colors import LinearSegmentedColormap

    colors = [
        (0.993, 0.978, 0.925),   # Warm white / empty
        (0.565, 0.820, 0.376),   # Light green
        (0.127, 0.566, 0.550),   # Teal
        (0.192, 0.407, 0.556),   # Blue
        (0.267, 0.004, 0.329),   # Dark purple / full
    ]
    return LinearSegmentedColormap.from_list("fill", colors)


CMAP_FILL = _create_fill_cmap()
FLUSH_EDGE_COLOR = "#d62728"


def _plot_cells(
    fill: np.ndarray,
    flushing: np.ndarray,
    ax: Axes,
    colorbar: bool,
):
    im = ax.imshow(
        fill,
        origin="upper",
        cmap=CMAP_FILL,
        vmin=0.0,
        vmax=1.0,
        aspect="auto",
        interpolation="nearest",
    )
    for row, col in zip(*np.nonzero(flushing)):
        ax.add_patch(Rectangle(
            (col - 0.5, row - 0.5), 1, 1,
            fill=False, edgecolor=FLUSH_EDGE_COLOR, linewidth=2.0,
        ))
    if colorbar:
        plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04, label="fill")
    return im


def plot_snapshot(
    snapshot: "ScheduleSnapshot",
    title: str | None = None,
    ax: Axes | None = None,
    colorbar: bool = True,
    figsize: tuple[float, float] = (8, 6),
) -> tuple[Figure, Axes]:
    """
    Plot every level at one step as a levels × bins heatmap.

    Args:
        snapshot: Output of take_snapshot()
        title: Plot title (default: "t = <step>")
        ax: Existing axes to plot on (creates new figure if None)
        colorbar: Whether to add a colorbar
        figsize: Figure size if creating new figure

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    _plot_cells(snapshot.fill, snapshot.flushing_mask(), ax, colorbar)

    n_levels, num_bins = snapshot.shape
    ax.set_xticks(range(num_bins))
    ax.set_yticks(range(n_levels))
    ax.set_title(title if title is not None else f"t = {snapshot.timestep}")
    ax.set_xlabel("bin")
    ax.set_ylabel("level")

    return fig, ax


def plot_timeline(
    timeline: "LevelTimeline",
    title: str | None = None,
    ax: Axes | None = None,
    colorbar: bool = True,
    figsize: tuple[float, float] = (6, 8),
) -> tuple[Figure, Axes]:
    """Plot one level over time as a steps × bins heatmap."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    flushing = timeline.kinds == FLUSHING_CODE
    _plot_cells(timeline.fill, flushing, ax, colorbar)

    n_steps, num_bins = timeline.fill.shape
    ax.set_xticks(range(num_bins))
    # Label at most ~20 rows so long timelines stay readable
    stride = max(1, n_steps // 20)
    ax.set_yticks(range(0, n_steps, stride))
    ax.set_yticklabels([str(int(s)) for s in timeline.steps[::stride]])
    ax.set_title(title if title is not None else f"Level {timeline.level}")
    ax.set_xlabel("bin")
    ax.set_ylabel("step")

    return fig, ax


def plot_schedule_summary(
    snapshot: "ScheduleSnapshot",
    timeline: "LevelTimeline",
    figsize: tuple[float, float] = (14, 6),
) -> Figure:
    """Plot a snapshot and a level timeline side by side."""
    fig, axes = plt.subplots(1, 2, figsize=figsize)

    plot_snapshot(snapshot, ax=axes[0])
    plot_timeline(timeline, ax=axes[1])

    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, dpi: int = 150) -> Path:
    """Save a figure, creating parent directories, and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path
