"""Utility helpers for terrain-sprites."""
