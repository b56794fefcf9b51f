"""Trace serialization."""
