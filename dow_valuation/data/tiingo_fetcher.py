"""Tiingo daily fundamentals fetcher.

One request per symbol; results are cached for the lifetime of the fetcher.
A failed request is logged and treated as "no data" for that symbol.
"""

import logging
from datetime import date

import httpx

from dow_valuation.config import Settings, DOW_30
from dow_valuation.data.cache import FundamentalsCache


logger = logging.getLogger(__name__)


class TiingoFetcher:
    """Fetches daily market cap and enterprise value from Tiingo."""

    ENDPOINT = "/tiingo/fundamentals/{symbol}/daily"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.cache = FundamentalsCache()
        self._client = client

        if not self.settings.tiingo_api_key:
            logger.warning("TIINGO_API_KEY not set")

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.settings.request_timeout)
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "TiingoFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _request(
        self, symbol: str, start_date: date | None = None, end_date: date | None = None
    ) -> list[dict]:
        """Make a single fundamentals request; raises on any failure."""
        params = {
            "token": self.settings.tiingo_api_key,
            "format": "json",
        }
        if start_date:
            params["startDate"] = start_date.isoformat()
        if end_date:
            params["endDate"] = end_date.isoformat()

        url = self.settings.tiingo_base_url.rstrip("/") + self.ENDPOINT.format(symbol=symbol)
        response = self.client.get(url, params=params)
        response.raise_for_status()

        data = response.json()

        # Tiingo reports errors as {"detail": "..."}
        if isinstance(data, dict) and "detail" in data:
            raise ValueError(data["detail"])
        if not isinstance(data, list):
            raise ValueError(f"Unexpected payload type: {type(data).__name__}")

        return data

    def _load(self, symbol: str) -> list[dict]:
        logger.info(f"Fetching fundamentals for {symbol}...")
        try:
            records = self._request(
                symbol, self.settings.window_start, self.settings.window_end
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching {symbol}: {e.response.status_code}")
            return []
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching {symbol}: {e}")
            return []

        records = sorted(
            (r for r in records if isinstance(r, dict)),
            key=lambda r: str(r.get("date") or ""),
        )
        logger.info(f"  Received {len(records)} records")
        return records

    def fetch_symbol(self, symbol: str) -> list[dict]:
        """
        Fetch daily fundamentals for one symbol.

        Args:
            symbol: Ticker symbol (e.g., "AAPL")

        Returns:
            Raw records sorted by date, or an empty list if the request failed
        """
        return self.cache.get_or_fetch(symbol, self._load)

    def fetch_all(self, symbols: list[str] | None = None) -> dict[str, list[dict]]:
        """
        Fetch every symbol, defaulting to the Dow 30.

        Returns:
            Dict mapping symbol to its records (possibly empty)
        """
        if symbols is None:
            symbols = list(DOW_30)

        results = {symbol: self.fetch_symbol(symbol) for symbol in symbols}

        missing = [symbol for symbol, records in results.items() if not records]
        if missing:
            logger.warning(f"No data for {len(missing)} symbols: {missing}")

        return results

    def get_status(self) -> dict[str, dict]:
        """Get cache status for every symbol requested so far."""
        return self.cache.get_cache_status()


def main() -> None:
    """CLI entry point."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Fetch Tiingo daily fundamentals")
    parser.add_argument(
        "--symbol",
        type=str,
        help="Fetch a single symbol (default: all Dow 30)",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show per-symbol record counts and dates after fetching",
    )
    args = parser.parse_args()

    settings = Settings()
    try:
        settings.validate()
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    with TiingoFetcher(settings) as fetcher:
        if args.symbol:
            fetcher.fetch_symbol(args.symbol.upper())
        else:
            fetcher.fetch_all()

        status = fetcher.get_status()
        if args.status:
            print("\nFetch status:")
            print("-" * 60)
            for symbol, info in sorted(status.items()):
                count = info["observation_count"]
                first = info["first_date"] or "N/A"
                last = info["last_date"] or "N/A"
                print(f"{symbol:6} | {count:4} obs | {first} -> {last}")

        empty = [s for s, info in status.items() if not info["observation_count"]]
        print(f"\nDone. {len(status) - len(empty)}/{len(status)} symbols returned data.")


if __name__ == "__main__":
    main()
