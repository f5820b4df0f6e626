"""Screw-removal puzzle: stage generation and coverage queries."""

__version__ = "0.1.0"
