"""Daily five-task assignment, streaks, badges and rewards backend."""

__version__ = "0.1.0"
