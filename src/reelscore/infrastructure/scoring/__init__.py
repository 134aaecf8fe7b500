"""Scoring: smart score aggregation."""
