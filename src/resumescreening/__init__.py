"""Bulk resume screening against hosted job positions."""

__version__ = "0.1.0"
