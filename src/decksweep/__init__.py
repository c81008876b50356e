"""decksweep: keep Steam libraries consistent across storage roots."""

__version__ = "0.1.0"
