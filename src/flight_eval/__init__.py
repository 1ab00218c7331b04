"""Evaluation harness for flight information extraction."""

__version__ = "0.1.0"
