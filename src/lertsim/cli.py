"""
Command-line driver: resolve a configuration and step through the schedule.

The driver owns the step counter. For each step it asks the engine for
every (level, bin) state and prints a text frame; optionally it also
saves a heatmap summary of the run.

    lertsim --memory-size 5 --disk-size 20 --expansion-factor 2 \
            --time-stretch 1 --start 0 --steps 8
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import Sequence

from lertsim.analysis.snapshot import level_timeline, take_snapshot
from lertsim.core.config import DEFAULT_WORD_BITS, DEPTH_MODES, resolve_configuration
from lertsim.core.engine import ScheduleEngine
from lertsim.core.errors import ScheduleError
from lertsim.viz.text import render_text

logger = logging.getLogger(__name__)

# Frames get unreadable past this many levels; ask for --max-level instead
MAX_DEFAULT_LEVELS = 32


def configure_logger(verbosity: str = "info") -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Args:
        verbosity: Log level (critical, error, warning, info, debug)

    Returns:
        Logger for this module
    """
    root = logging.getLogger()
    root.setLevel(verbosity.upper())
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(verbosity.upper())
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    return logging.getLogger(__name__)


def get_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the schedule driver."""
    ap = argparse.ArgumentParser(
        description="Cascading flush schedule simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--memory-size", "-M", type=int, default=5, help="memory size M")
    ap.add_argument("--disk-size", "-D", type=int, default=20, help="disk size D")
    ap.add_argument("--expansion-factor", "-r", type=int, default=2, help="fan-out r between levels")
    ap.add_argument("--time-stretch", "-a", type=float, default=1.0, help="time stretch alpha in (0, 1]")
    ap.add_argument("--depth-mode", choices=DEPTH_MODES, default="literal", help="depth formula")
    ap.add_argument("--word-bits", type=int, default=DEFAULT_WORD_BITS, help="integer width for overflow checks")
    ap.add_argument("--start", type=int, default=0, help="first step to render")
    ap.add_argument("--steps", type=int, default=8, help="number of steps to render")
    ap.add_argument("--partial-fill", action="store_true", help="show fractional fill below the top level")
    ap.add_argument("--max-level", type=int, default=None, help="last level to render (default: depth)")
    ap.add_argument("--plot", default=None, help="directory to save a heatmap summary into")
    ap.add_argument("--plot-level", type=int, default=1, help="level shown in the timeline plot")
    ap.add_argument(
        "--verbosity",
        choices=["critical", "error", "warning", "info", "debug"],
        default="warning",
        help="logging level",
    )
    args = ap.parse_args(argv)

    if args.start < 0:
        ap.error(f"--start must be non-negative, got {args.start}")
    if args.steps < 1:
        ap.error(f"--steps must be >= 1, got {args.steps}")
    return args


def _last_level(depth: int, max_level: int | None) -> int:
    if max_level is not None:
        return min(depth, max_level)
    if depth + 1 > MAX_DEFAULT_LEVELS:
        logger.warning(
            "depth=%d is large; rendering levels 0..%d (use --max-level)",
            depth, MAX_DEFAULT_LEVELS - 1,
        )
        return MAX_DEFAULT_LEVELS - 1
    return depth


def _save_plot(engine: ScheduleEngine, args: argparse.Namespace, last_level: int) -> Path:
    from lertsim.viz.grid import plot_schedule_summary, save_figure

    final_step = args.start + args.steps - 1
    snapshot = take_snapshot(engine, final_step, args.partial_fill, max_level=last_level)
    timeline = level_timeline(
        engine, min(args.plot_level, last_level), args.start, args.steps, args.partial_fill
    )
    fig = plot_schedule_summary(snapshot, timeline)
    return save_figure(fig, Path(args.plot) / f"schedule_t{args.start}-{final_step}.png")


def main(argv: Sequence[str] | None = None) -> int:
    """
    Resolve the configuration, print its parameters, then one frame per step.

    Returns 0 on success, 2 if the configuration or a query is invalid.
    """
    args = get_args(argv)
    configure_logger(args.verbosity)

    try:
        config = resolve_configuration(
            args.memory_size,
            args.disk_size,
            args.expansion_factor,
            args.time_stretch,
            depth_mode=args.depth_mode,
            word_bits=args.word_bits,
        )
        print(config)
        print()

        engine = ScheduleEngine(config)
        last_level = _last_level(config.depth, args.max_level)
        for t in range(args.start, args.start + args.steps):
            rows = engine.states(t, args.partial_fill, max_level=last_level)
            print(render_text(rows, timestep=t))

        if args.plot:
            path = _save_plot(engine, args, last_level)
            logger.info("Saved %s", path)
    except ScheduleError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
