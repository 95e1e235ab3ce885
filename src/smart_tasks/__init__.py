"""Smart Task Scheduler: personal task tracker with background reminders."""

__version__ = "0.1.0"
