"""In-memory cache for fetched fundamentals."""

from typing import Callable


class FundamentalsCache:
    """Per-run cache of raw fundamentals records, keyed by symbol.

    Entries are written once per symbol and never invalidated; an empty
    list is a valid entry and means the symbol has no data this run.
    """

    def __init__(self) -> None:
        self._records: dict[str, list[dict]] = {}

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._records

    def __len__(self) -> int:
        return len(self._records)

    def get(self, symbol: str) -> list[dict] | None:
        """Get cached records for a symbol, or None if never fetched."""
        return self._records.get(symbol)

    def store(self, symbol: str, records: list[dict]) -> int:
        """
        Store records for a symbol.

        Returns:
            Number of records stored
        """
        self._records[symbol] = list(records)
        return len(self._records[symbol])

    def get_or_fetch(self, symbol: str, loader: Callable[[str], list[dict]]) -> list[dict]:
        """Return cached records, calling ``loader`` only on the first request."""
        if symbol not in self._records:
            self.store(symbol, loader(symbol))
        return self._records[symbol]

    def symbols(self) -> list[str]:
        return list(self._records)

    def get_cache_status(self) -> dict[str, dict]:
        """Get status of cached data for each symbol."""
        status = {}
        for symbol, records in self._records.items():
            dates = sorted(str(r["date"])[:10] for r in records if r.get("date"))
            status[symbol] = {
                "observation_count": len(records),
                "first_date": dates[0] if dates else None,
                "last_date": dates[-1] if dates else None,
            }
        return status
