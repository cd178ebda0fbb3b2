"""Data model, Raft commands and input validation for a distributed configuration center."""

__version__ = "0.1.0"