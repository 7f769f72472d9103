"""Labeled console logging for applications embedding tablebind."""
