"""Shared fixtures."""
from datetime import date

import httpx
import pytest

from dow_valuation.config import Settings
from dow_valuation.models.fundamentals import FundamentalObservation


@pytest.fixture
def settings(tmp_path):
    """Settings with a short window and a tiny animation."""
    return Settings(
        tiingo_api_key="TEST",
        tiingo_base_url="https://api.tiingo.test",
        window_start=date(2020, 1, 1),
        window_end=date(2020, 1, 5),
        output_dir=tmp_path / "output",
        fps=2,
        duration_seconds=3,
        pause_seconds=1,
    )


def obs(symbol, day, market_cap=None, enterprise_value=None, name="Company"):
    return FundamentalObservation(
        symbol=symbol,
        date=date(2020, 1, day),
        company_name=name,
        market_cap=market_cap,
        enterprise_value=enterprise_value,
    )


@pytest.fixture
def abc_observations():
    """A has two points, B is complete, C has one interior gap."""
    return [
        obs("A", 1, 100.0, 110.0, name="Alpha"),
        obs("A", 5, 200.0, 220.0, name="Alpha"),
        obs("B", 1, 50.0, 40.0, name="Bravo"),
        obs("B", 2, 55.0, 44.0, name="Bravo"),
        obs("B", 3, 60.0, 48.0, name="Bravo"),
        obs("B", 4, 45.0, 36.0, name="Bravo"),
        obs("B", 5, 40.0, 32.0, name="Bravo"),
        obs("C", 1, 10.0, 12.0, name="Charlie"),
        obs("C", 3, 30.0, 36.0, name="Charlie"),
        obs("C", 4, 20.0, 24.0, name="Charlie"),
        obs("C", 5, 10.0, 12.0, name="Charlie"),
    ]


def tiingo_record(day, market_cap, enterprise_value):
    return {
        "date": f"2020-01-{day:02d}T00:00:00.000Z",
        "marketCap": market_cap,
        "enterpriseVal": enterprise_value,
        "peRatio": 20.0,
        "pbRatio": 5.0,
        "trailingPEG1Y": 1.5,
    }


@pytest.fixture
def tiingo_client():
    """Build an httpx client whose responses come from a symbol -> payload map.

    A payload that is an exception instance is raised by the transport; an
    ``httpx.Response`` is returned as is; anything else is sent as JSON.
    Every request is appended to ``client.requests``.
    """
    def factory(payloads: dict) -> httpx.Client:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            symbol = request.url.path.split("/")[3]
            payload = payloads.get(symbol, httpx.Response(404, json={"detail": "Not found."}))
            if isinstance(payload, Exception):
                raise payload
            if isinstance(payload, httpx.Response):
                return payload
            return httpx.Response(200, json=payload)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        client.requests = requests
        return client

    return factory


@pytest.fixture
def make_obs():
    return obs


@pytest.fixture
def make_record():
    return tiingo_record
