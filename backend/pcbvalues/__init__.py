"""PCBValues quiz backend: scoring, matching and score submission."""

__version__ = "1.0.0"
