"""Animated scatter of market cap change versus enterprise value change."""

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.colors import qualitative

from dow_valuation.config import Settings


logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "market_cap",
    "enterprise_value",
    "pct_change_market_cap",
    "pct_change_enterprise_value",
]

MAX_MARKER_SIZE = 60  # px diameter of the largest company
AXIS_PADDING = 10.0  # percentage points
PALETTE = qualitative.Dark24


def select_highlights(df: pd.DataFrame, count: int = 6) -> list[str]:
    """Symbols with the largest baseline enterprise value."""
    baselines = (
        df.drop_duplicates("symbol")
        .set_index("symbol")["baseline_enterprise_value"]
        .dropna()
    )
    return list(baselines.sort_values(ascending=False).head(count).index)


def should_label(
    symbol: str,
    pct_market_cap: float,
    pct_enterprise_value: float,
    highlights: list[str] | set[str],
    threshold: float = 0.30,
) -> bool:
    """Label highlighted symbols and any point that has moved past the threshold."""
    if symbol in highlights:
        return True
    return bool(abs(pct_market_cap) >= threshold or abs(pct_enterprise_value) >= threshold)


def build_frames(
    df: pd.DataFrame,
    fps: int = 24,
    duration_seconds: int = 60,
    pause_seconds: int = 10,
) -> pd.DataFrame:
    """
    Sample the daily table into animation frames.

    The days are spread over ``fps * duration_seconds`` frames, blending
    linearly between neighbouring days, and the last frame is repeated
    ``fps * pause_seconds`` times.

    Returns:
        Long frame with one row per (frame, symbol)
    """
    n_main = fps * duration_seconds
    n_pause = fps * pause_seconds
    if df.empty or n_main <= 0:
        return pd.DataFrame(columns=["frame", "date", "symbol", "display_label", *FRAME_COLUMNS])

    dates = np.sort(df["date"].unique())
    symbols = sorted(df["symbol"].unique())
    n_symbols = len(symbols)

    positions = np.linspace(0, len(dates) - 1, n_main)
    lo = np.floor(positions).astype(int)
    hi = np.minimum(lo + 1, len(dates) - 1)
    weight = (positions - lo)[:, None]

    result = pd.DataFrame({
        "frame": np.repeat(np.arange(n_main), n_symbols),
        "date": np.repeat(dates[lo], n_symbols),
        "symbol": np.tile(symbols, n_main),
    })

    for col in FRAME_COLUMNS:
        wide = (
            df.pivot(index="date", columns="symbol", values=col)
            .reindex(index=dates, columns=symbols)
            .to_numpy(dtype=float)
        )
        lo_vals, hi_vals = wide[lo], wide[hi]
        blended = np.where(weight == 0, lo_vals, lo_vals * (1 - weight) + hi_vals * weight)
        result[col] = blended.ravel()

    per_symbol = df.groupby("symbol")
    result["display_label"] = result["symbol"].map(per_symbol["display_label"].last())
    if "baseline_enterprise_value" in df.columns:
        result["baseline_enterprise_value"] = result["symbol"].map(
            per_symbol["baseline_enterprise_value"].first()
        )

    if n_pause > 0:
        last = result[result["frame"] == n_main - 1]
        hold = [last.assign(frame=n_main + i) for i in range(n_pause)]
        result = pd.concat([result, *hold], ignore_index=True)

    return result


def _axis_range(values: pd.Series) -> list[float]:
    finite = values[np.isfinite(values)]
    if finite.empty:
        return [-50.0, 50.0]
    return [float(finite.min()) - AXIS_PADDING, float(finite.max()) + AXIS_PADDING]


def build_figure(frames: pd.DataFrame, settings: Settings | None = None) -> go.Figure:
    """Build the animated plotly figure from ``build_frames`` output."""
    settings = settings or Settings()

    frames = frames.copy()
    frames["x"] = frames["pct_change_market_cap"] * 100
    frames["y"] = frames["pct_change_enterprise_value"] * 100

    highlights = set()
    if "baseline_enterprise_value" in frames.columns:
        highlights = set(select_highlights(frames, settings.highlight_count))
    frames["labeled"] = [
        should_label(s, mc, ev, highlights, settings.highlight_threshold)
        for s, mc, ev in zip(
            frames["symbol"],
            frames["pct_change_market_cap"],
            frames["pct_change_enterprise_value"],
        )
    ]

    max_cap = frames["market_cap"].max()
    sizeref = 2.0 * max_cap / MAX_MARKER_SIZE ** 2 if pd.notna(max_cap) and max_cap > 0 else 1.0

    symbols = sorted(frames["symbol"].unique())
    colors = {s: PALETTE[i % len(PALETTE)] for i, s in enumerate(symbols)}

    def scatter(rows: pd.DataFrame) -> go.Scatter:
        text = [
            label if flag and isinstance(label, str) else ""
            for label, flag in zip(rows["display_label"], rows["labeled"])
        ]
        return go.Scatter(
            x=rows["x"], y=rows["y"],
            mode="markers+text",
            text=text,
            textposition="top center", textfont=dict(size=10),
            marker=dict(
                size=rows["market_cap"].fillna(0), sizemode="area", sizeref=sizeref, sizemin=2,
                color=[colors[s] for s in rows["symbol"]], opacity=0.75,
                line=dict(width=1, color="#0f172a"),
            ),
            customdata=rows["symbol"],
            hovertemplate="%{customdata}<br>Market cap: %{x:+.1f}%<br>EV: %{y:+.1f}%<extra></extra>",
        )

    def title(rows: pd.DataFrame) -> str:
        day = pd.Timestamp(rows["date"].iloc[0])
        return f"Dow 30: change in market cap vs enterprise value, {day:%b %d, %Y}"

    groups = [g for _, g in frames.groupby("frame", sort=True)]
    if not groups:
        raise ValueError("No frames to render")

    frame_duration = 1000 / settings.fps

    fig = go.Figure(
        data=[scatter(groups[0])],
        frames=[
            go.Frame(data=[scatter(g)], name=str(i), layout=go.Layout(title_text=title(g)))
            for i, g in enumerate(groups)
        ],
    )

    fig.update_layout(
        width=settings.width, height=settings.height,
        margin=dict(l=60, r=20, t=60, b=60),
        title=dict(text=title(groups[0]), font=dict(size=14), x=0),
        xaxis=dict(
            title="Change in market cap (%)", range=_axis_range(frames["x"]),
            zeroline=True, zerolinecolor="#94a3b8", ticksuffix="%",
        ),
        yaxis=dict(
            title="Change in enterprise value (%)", range=_axis_range(frames["y"]),
            zeroline=True, zerolinecolor="#94a3b8", ticksuffix="%",
        ),
        showlegend=False,
        updatemenus=[dict(
            type="buttons", direction="left", x=0, y=-0.12, xanchor="left", yanchor="top",
            buttons=[
                dict(
                    label="Play", method="animate",
                    args=[None, dict(
                        frame=dict(duration=frame_duration, redraw=False),
                        transition=dict(duration=0), fromcurrent=True,
                    )],
                ),
                dict(
                    label="Pause", method="animate",
                    args=[[None], dict(frame=dict(duration=0, redraw=False), mode="immediate")],
                ),
            ],
        )],
    )
    return fig


def export_animation(
    df: pd.DataFrame, output_path: Path | str | None = None, settings: Settings | None = None
) -> Path:
    """
    Render the normalized table to a self-contained HTML animation.

    Args:
        df: Output of the normalizer
        output_path: Where to write (default: settings.animation_path)
        settings: Animation and labelling settings

    Returns:
        Path to the written file
    """
    settings = settings or Settings()
    path = Path(output_path) if output_path else settings.animation_path
    path.parent.mkdir(parents=True, exist_ok=True)

    frames = build_frames(df, settings.fps, settings.duration_seconds, settings.pause_seconds)
    fig = build_figure(frames, settings)
    fig.write_html(str(path), include_plotlyjs=True, auto_play=False)

    logger.info(f"Wrote {frames['frame'].nunique()} frames to {path}")
    return path
