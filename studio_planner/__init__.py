"""Studio session planner: plan templates, allocations and execution history."""

__version__ = "0.1.0"
