"""Relative valuation race of the Dow 30 companies."""

__version__ = "0.1.0"
