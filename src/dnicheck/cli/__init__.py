"""Command line interface for dnicheck."""
