"""
lertsim: Cascading Flush Schedule Simulator

Computes when each bin of each level of a write-optimized buffer tree
fills, partially fills and flushes downward.

Core concepts:
- Each level is a ring of bins that flush one at a time in rotation
- Level j is r^j times slower than the top level
- A level only starts flushing once the levels above it have warmed up
- Flush work is spread evenly over time instead of bursting

Everything is a pure function of (level, bin, step); renderers own the
step counter.
"""

__version__ = "0.1.0"
