"""Saved objects: export/import of typed, reference-linked objects."""

__version__ = "0.1.0"
