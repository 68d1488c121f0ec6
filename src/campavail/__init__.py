"""Single-day booking availability and conflict detection for camp rentals."""

__version__ = "0.1.0"
