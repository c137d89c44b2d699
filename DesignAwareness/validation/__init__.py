"""Structural, timing, referential and entity-level checks."""
