"""
Errors raised by the schedule core.

All of them are caller- or configuration-facing. Nothing in the core does
I/O, so there is never anything to retry: errors propagate to whoever
drives the schedule (the CLI turns them into a log line and exit code).
"""


class ScheduleError(Exception):
    """Base class for every error raised by lertsim."""


class InvalidConfiguration(ScheduleError, ValueError):
    """A tunable parameter is outside its allowed range."""


class OutOfRange(ScheduleError, IndexError):
    """A level, bin index or timestep does not exist in this schedule."""


class ArithmeticOverflow(ScheduleError, OverflowError):
    """An intermediate value does not fit in the configured word width."""
