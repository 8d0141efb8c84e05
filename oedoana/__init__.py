"""Event-level analysis building blocks for OEDO beam-line detector data."""

__version__ = "0.1.0"