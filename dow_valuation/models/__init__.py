"""Data models."""

from dow_valuation.models.fundamentals import (
    FundamentalObservation,
    NormalizedObservation,
    Symbol,
    parse_fundamentals,
)

__all__ = [
    "FundamentalObservation",
    "NormalizedObservation",
    "Symbol",
    "parse_fundamentals",
]
