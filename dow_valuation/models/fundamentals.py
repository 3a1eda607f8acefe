"""Data models for daily company fundamentals."""

import logging
import math
from dataclasses import asdict, dataclass, fields
from datetime import date
from typing import Iterable

import pandas as pd


logger = logging.getLogger(__name__)

Symbol = str

# Columns carried by every observation frame
BASE_COLUMNS = ["symbol", "date", "company_name", "market_cap", "enterprise_value"]

NORMALIZED_COLUMNS = BASE_COLUMNS + [
    "display_label",
    "baseline_market_cap",
    "baseline_enterprise_value",
    "pct_change_market_cap",
    "pct_change_enterprise_value",
]


@dataclass
class FundamentalObservation:
    """Single day of fundamentals for one company."""

    symbol: Symbol
    date: date
    company_name: str | None = None
    market_cap: float | None = None
    enterprise_value: float | None = None


@dataclass
class NormalizedObservation(FundamentalObservation):
    """Densified observation with changes relative to the window baseline.

    Percentage changes are fractions (0.25 == 25%). ``nan`` means the change
    is undefined because the baseline was absent or zero.
    """

    display_label: str | None = None
    baseline_market_cap: float | None = None
    baseline_enterprise_value: float | None = None
    pct_change_market_cap: float = math.nan
    pct_change_enterprise_value: float = math.nan


def _to_float(value) -> float | None:
    if value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(result) else result


def _to_optional(value):
    """Map pandas missing markers to None."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def parse_fundamentals(
    symbol: Symbol, records: Iterable[dict], company_name: str | None = None
) -> list[FundamentalObservation]:
    """
    Convert raw API records into observations.

    Args:
        symbol: Ticker the records belong to
        records: Dicts with ``date``, ``marketCap`` and ``enterpriseVal`` keys
        company_name: Display name joined onto every record

    Returns:
        Observations in the order of the input records
    """
    observations = []
    skipped = 0

    for record in records:
        raw_date = record.get("date")
        try:
            obs_date = date.fromisoformat(str(raw_date)[:10])
        except ValueError:
            skipped += 1
            continue

        observations.append(
            FundamentalObservation(
                symbol=symbol,
                date=obs_date,
                company_name=company_name,
                market_cap=_to_float(record.get("marketCap")),
                enterprise_value=_to_float(record.get("enterpriseVal")),
            )
        )

    if skipped:
        logger.warning(f"{symbol}: skipped {skipped} records without a valid date")

    return observations


def observations_to_frame(observations: Iterable[FundamentalObservation]) -> pd.DataFrame:
    """Build a DataFrame from observations, one column per field."""
    rows = [asdict(obs) for obs in observations]
    if not rows:
        df = pd.DataFrame(columns=BASE_COLUMNS)
    else:
        df = pd.DataFrame(rows)

    df["date"] = pd.to_datetime(df["date"])
    for col in ("market_cap", "enterprise_value"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    return df


def frame_to_normalized(df: pd.DataFrame) -> list[NormalizedObservation]:
    """Convert a normalized frame back into records."""
    names = [f.name for f in fields(NormalizedObservation)]
    pct_fields = {"pct_change_market_cap", "pct_change_enterprise_value"}

    results = []
    for row in df[names].itertuples(index=False):
        values = row._asdict()
        values["date"] = pd.Timestamp(values["date"]).date()
        for name in names:
            if name in ("symbol", "date"):
                continue
            if name in pct_fields:
                values[name] = float(values[name])
            else:
                values[name] = _to_optional(values[name])
        results.append(NormalizedObservation(**values))
    return results
