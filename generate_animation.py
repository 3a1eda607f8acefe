"""Generate the Dow 30 valuation race animation and data table."""
import logging

from dow_valuation.config import Settings
from dow_valuation.pipeline import run
from dow_valuation.ui.animation import select_highlights

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

settings = Settings()
normalized = run(settings)

if normalized.empty:
    print("No data fetched. Check TIINGO_API_KEY and the window dates.")
else:
    highlights = select_highlights(normalized, settings.highlight_count)
    print(f"Saved {normalized['date'].nunique()} days for {normalized['symbol'].nunique()} symbols")
    print(f"Largest by enterprise value on {settings.window_start}: {', '.join(highlights)}")
    print(f"Animation: {settings.animation_path}")
