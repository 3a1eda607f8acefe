"""Data fetching and caching."""

from .tiingo_fetcher import TiingoFetcher
from .cache import FundamentalsCache

__all__ = ["TiingoFetcher", "FundamentalsCache"]
