"""Candidate pipeline and placement lifecycle engine."""

__version__ = "0.1.0"
