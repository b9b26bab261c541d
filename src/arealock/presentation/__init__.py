"""Presentation layers for the progression engine."""
