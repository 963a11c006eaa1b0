"""Candidate assessment derivation, ranking and comparison selection."""

__version__ = "0.1.0"
