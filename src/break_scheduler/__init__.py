"""Break Scheduler - work/break interval timer with enforced breaks."""

__version__ = "0.1.0"
