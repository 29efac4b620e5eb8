"""Building blocks for a dynamic DNS updater: printing, monitors, notifiers and a record setter."""

__version__ = "0.1.0"

__all__ = [
    "healthchecks",
    "monitor",
    "notifier",
    "pp",
    "queued",
    "setter",
    "uptimekuma",
]