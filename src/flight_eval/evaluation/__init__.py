"""Evaluation engine for flight information extraction.

This package provides tools for:
- Comparing extracted flight fields against ground truth (exact, aircraft
  family and duration-tolerance rules)
- Aggregating per-field precision / recall / F1 and a weighted overall score
- Flagging anomalous cases for manual review
- Running test cases through an extraction provider and reporting results
"""
