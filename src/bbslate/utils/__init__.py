"""Utility helpers for bbslate."""
