"""Configuration."""

from dow_valuation.config.settings import Settings, DOW_30

__all__ = ["Settings", "DOW_30"]
