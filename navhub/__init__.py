"""Intranet/internet aware navigation link aggregation."""

__version__ = "0.1.0"
