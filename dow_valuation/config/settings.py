"""Configuration settings for the valuation race."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
import os

from dotenv import load_dotenv


load_dotenv()


# Dow Jones Industrial Average members at the end of 2020
DOW_30: dict[str, str] = {
    "AAPL": "Apple Inc.",
    "AMGN": "Amgen",
    "AXP": "American Express",
    "BA": "Boeing",
    "CAT": "Caterpillar Inc.",
    "CRM": "Salesforce",
    "CSCO": "Cisco Systems",
    "CVX": "Chevron",
    "DIS": "The Walt Disney Company",
    "DOW": "Dow Inc.",
    "GS": "Goldman Sachs",
    "HD": "The Home Depot",
    "HON": "Honeywell",
    "IBM": "IBM",
    "INTC": "Intel",
    "JNJ": "Johnson & Johnson",
    "JPM": "JPMorgan Chase",
    "KO": "The Coca-Cola Company",
    "MCD": "McDonald's",
    "MMM": "3M",
    "MRK": "Merck & Co.",
    "MSFT": "Microsoft",
    "NKE": "Nike",
    "PG": "Procter & Gamble",
    "TRV": "The Travelers Companies",
    "UNH": "UnitedHealth Group",
    "V": "Visa Inc.",
    "VZ": "Verizon",
    "WBA": "Walgreens Boots Alliance",
    "WMT": "Walmart",
}


@dataclass
class Settings:
    """Application settings."""

    tiingo_api_key: str = field(default_factory=lambda: os.getenv("TIINGO_API_KEY", ""))
    tiingo_base_url: str = field(
        default_factory=lambda: os.getenv("TIINGO_BASE_URL", "https://api.tiingo.com")
    )
    request_timeout: float = 30.0
    window_start: date = field(
        default_factory=lambda: date.fromisoformat(os.getenv("DOW_WINDOW_START", "2020-01-01"))
    )
    window_end: date = field(
        default_factory=lambda: date.fromisoformat(os.getenv("DOW_WINDOW_END", "2020-12-31"))
    )
    output_dir: Path = field(
        default_factory=lambda: Path(__file__).parent.parent.parent / "output"
    )

    # Animation
    fps: int = 24
    duration_seconds: int = 60
    pause_seconds: int = 10
    width: int = 800
    height: int = 600

    # Labelling
    label_max_length: int = 20
    highlight_count: int = 6
    highlight_threshold: float = 0.30

    def validate(self) -> None:
        """Validate required settings."""
        if not self.tiingo_api_key:
            raise ValueError(
                "TIINGO_API_KEY not set. Get one at: "
                "https://www.tiingo.com/account/api/token"
            )
        if self.window_start > self.window_end:
            raise ValueError(
                f"Window start {self.window_start} is after window end {self.window_end}"
            )

    @property
    def animation_path(self) -> Path:
        return self.output_dir / "dow_valuation.html"

    @property
    def data_path(self) -> Path:
        return self.output_dir / "normalized.csv"
