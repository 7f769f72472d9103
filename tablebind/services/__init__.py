"""Binding services: column resolution, read/write pipelines and their helpers."""
