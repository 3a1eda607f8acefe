"""Reshape per-symbol fundamentals into a dense daily table.

The pipeline is: window filter, label shortening, densification onto a
daily calendar, per-symbol forward fill of labels, interior linear
interpolation of values, and percentage change against each symbol's
first row in the window.
"""

import logging
from datetime import date
from typing import Iterable

import pandas as pd

from dow_valuation.models.fundamentals import (
    BASE_COLUMNS,
    NORMALIZED_COLUMNS,
    FundamentalObservation,
    NormalizedObservation,
    frame_to_normalized,
    observations_to_frame,
)


logger = logging.getLogger(__name__)

LABEL_MAX_LENGTH = 20
ELLIPSIS = "..."

LABEL_COLUMNS = ["company_name", "display_label"]
VALUE_COLUMNS = ["market_cap", "enterprise_value"]

# value column -> (baseline column, percentage change column)
CHANGE_COLUMNS = {
    "market_cap": ("baseline_market_cap", "pct_change_market_cap"),
    "enterprise_value": ("baseline_enterprise_value", "pct_change_enterprise_value"),
}


def shorten_label(
    symbol: str, company_name: str | None, max_length: int = LABEL_MAX_LENGTH
) -> str | None:
    """Build ``"<symbol>: <name>"``, truncated to ``max_length`` plus an ellipsis."""
    if company_name is None or pd.isna(company_name):
        return None
    label = f"{symbol}: {company_name}"
    if len(label) > max_length:
        return label[:max_length] + ELLIPSIS
    return label


def filter_window(df: pd.DataFrame, start: date, end: date) -> pd.DataFrame:
    """Keep rows with ``start <= date <= end``."""
    mask = (df["date"] >= pd.Timestamp(start)) & (df["date"] <= pd.Timestamp(end))
    return df.loc[mask].copy()


def densify(df: pd.DataFrame) -> pd.DataFrame:
    """
    Expand to one row per symbol per calendar day.

    The calendar spans the earliest to the latest date across all symbols.
    Only symbols present in ``df`` appear in the result. Duplicate
    (symbol, date) rows keep the last occurrence.
    """
    if df.empty:
        return df.reset_index(drop=True)

    df = df.sort_values(["symbol", "date"], kind="stable")
    df = df.drop_duplicates(["symbol", "date"], keep="last")

    calendar = pd.date_range(df["date"].min(), df["date"].max(), freq="D")
    symbols = sorted(df["symbol"].unique())

    grid = pd.MultiIndex.from_product(
        [symbols, calendar], names=["symbol", "date"]
    ).to_frame(index=False)
    grid["date"] = grid["date"].astype(df["date"].dtype)

    return grid.merge(df, on=["symbol", "date"], how="left")


def forward_fill_labels(df: pd.DataFrame) -> pd.DataFrame:
    """Carry the last known name and label forward within each symbol."""
    df = df.sort_values(["symbol", "date"]).reset_index(drop=True)
    cols = [c for c in LABEL_COLUMNS if c in df.columns]

    filled = df.groupby("symbol")[cols].ffill()
    for col in cols:
        df[col] = pd.Series(
            [None if pd.isna(v) else v for v in filled[col]], index=df.index, dtype=object
        )
    return df


def interpolate_values(df: pd.DataFrame) -> pd.DataFrame:
    """
    Linearly interpolate interior gaps in market cap and enterprise value.

    Weights come from the distance in days, so sparse frames work too. Values
    before a symbol's first or after its last known point stay missing.
    """
    df = df.sort_values(["symbol", "date"]).reset_index(drop=True)

    for col in VALUE_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    for _, idx in df.groupby("symbol").groups.items():
        dates = pd.DatetimeIndex(df.loc[idx, "date"])
        for col in VALUE_COLUMNS:
            series = pd.Series(df.loc[idx, col].to_numpy(), index=dates)
            df.loc[idx, col] = series.interpolate(method="time", limit_area="inside").to_numpy()
    return df


def add_baseline_changes(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add baseline and percentage change columns.

    The baseline is each symbol's first row in date order. A missing or zero
    baseline makes every change for that symbol NaN.
    """
    df = df.sort_values(["symbol", "date"]).reset_index(drop=True)
    first_rows = df.drop_duplicates("symbol", keep="first").set_index("symbol")

    for col, (baseline_col, pct_col) in CHANGE_COLUMNS.items():
        baseline = df["symbol"].map(first_rows[col]).astype(float)
        df[baseline_col] = baseline

        usable = baseline.where(baseline != 0)
        df[pct_col] = (df[col] - usable) / usable

        bad = sorted(first_rows.index[first_rows[col].isna() | (first_rows[col] == 0)])
        if bad:
            logger.warning(f"Missing or zero baseline {col} for: {bad}")

    return df


def normalize_frame(
    df: pd.DataFrame,
    window_start: date,
    window_end: date,
    label_max_length: int = LABEL_MAX_LENGTH,
) -> pd.DataFrame:
    """
    Run the full normalization on an observation frame.

    Args:
        df: Frame with at least the observation columns
        window_start: First date to keep (inclusive)
        window_end: Last date to keep (inclusive)
        label_max_length: Truncation threshold for display labels

    Returns:
        Frame with one row per symbol per day and the derived columns
    """
    df = df[BASE_COLUMNS].copy()
    df["date"] = pd.to_datetime(df["date"]).dt.normalize()
    for col in VALUE_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    df = filter_window(df, window_start, window_end)
    if df.empty:
        logger.warning(f"No observations between {window_start} and {window_end}")
        return pd.DataFrame(columns=NORMALIZED_COLUMNS)

    df["display_label"] = [
        shorten_label(symbol, name, label_max_length)
        for symbol, name in zip(df["symbol"], df["company_name"])
    ]

    df = densify(df)
    df = forward_fill_labels(df)
    df = interpolate_values(df)
    df = add_baseline_changes(df)

    logger.info(
        f"Normalized {df['symbol'].nunique()} symbols over "
        f"{df['date'].nunique()} days ({len(df)} rows)"
    )
    return df[NORMALIZED_COLUMNS].reset_index(drop=True)


def normalize(
    observations: Iterable[FundamentalObservation],
    window_start: date,
    window_end: date,
    label_max_length: int = LABEL_MAX_LENGTH,
) -> list[NormalizedObservation]:
    """Normalize observations; see ``normalize_frame``."""
    df = observations_to_frame(observations)
    result = normalize_frame(df, window_start, window_end, label_max_length)
    return frame_to_normalized(result)
