"""Fetch, normalize and render the Dow 30 valuation race."""

import logging
from datetime import date

import pandas as pd

from dow_valuation.config import Settings, DOW_30
from dow_valuation.data.tiingo_fetcher import TiingoFetcher
from dow_valuation.models.fundamentals import (
    FundamentalObservation,
    observations_to_frame,
    parse_fundamentals,
)
from dow_valuation.transform.normalizer import normalize_frame
from dow_valuation.ui.animation import export_animation


logger = logging.getLogger(__name__)


def collect_observations(
    fetcher: TiingoFetcher, companies: dict[str, str] | None = None
) -> list[FundamentalObservation]:
    """Fetch every company and join its display name onto the records."""
    if companies is None:
        companies = DOW_30

    observations = []
    for symbol, records in fetcher.fetch_all(list(companies)).items():
        observations.extend(parse_fundamentals(symbol, records, companies.get(symbol)))

    logger.info(f"Collected {len(observations)} observations for {len(companies)} companies")
    return observations


def run(
    settings: Settings | None = None,
    fetcher: TiingoFetcher | None = None,
    companies: dict[str, str] | None = None,
    render: bool = True,
) -> pd.DataFrame:
    """
    Run the whole pipeline.

    Args:
        settings: Token, window, output and animation settings
        fetcher: Pre-built fetcher (default: one built from settings)
        companies: Symbol -> company name (default: the Dow 30)
        render: Write the HTML animation as well as the data table

    Returns:
        The normalized frame
    """
    settings = settings or Settings()

    own_fetcher = fetcher is None
    if own_fetcher:
        settings.validate()
        fetcher = TiingoFetcher(settings)

    try:
        observations = collect_observations(fetcher, companies)
    finally:
        if own_fetcher:
            fetcher.close()

    normalized = normalize_frame(
        observations_to_frame(observations),
        settings.window_start,
        settings.window_end,
        settings.label_max_length,
    )

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    normalized.to_csv(settings.data_path, index=False, date_format="%Y-%m-%d")
    logger.info(f"Saved {len(normalized)} rows to {settings.data_path}")

    if render:
        if normalized.empty:
            logger.warning("Nothing to render")
        else:
            export_animation(normalized, settings.animation_path, settings)

    return normalized


def main() -> None:
    """CLI entry point."""
    import argparse
    import sys
    from pathlib import Path

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Render the Dow 30 valuation race")
    parser.add_argument("--start", type=date.fromisoformat, help="Window start (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="Window end (YYYY-MM-DD)")
    parser.add_argument("--output", type=Path, help="Output directory")
    parser.add_argument(
        "--symbols",
        type=str,
        help="Comma-separated subset of Dow 30 symbols",
    )
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Only write the normalized data table",
    )
    args = parser.parse_args()

    settings = Settings()
    if args.start:
        settings.window_start = args.start
    if args.end:
        settings.window_end = args.end
    if args.output:
        settings.output_dir = args.output

    companies = DOW_30
    if args.symbols:
        requested = [s.strip().upper() for s in args.symbols.split(",") if s.strip()]
        unknown = [s for s in requested if s not in DOW_30]
        if unknown:
            print(f"Unknown symbols: {', '.join(unknown)}")
            print(f"Available: {', '.join(DOW_30)}")
            sys.exit(1)
        companies = {s: DOW_30[s] for s in requested}

    try:
        settings.validate()
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    normalized = run(settings, companies=companies, render=not args.no_render)

    print(f"\nDone. {normalized['symbol'].nunique()} symbols, {len(normalized)} rows.")
    print(f"Data: {settings.data_path}")
    if not args.no_render:
        print(f"Animation: {settings.animation_path}")


if __name__ == "__main__":
    main()
