"""
Fixtures and test configuration for the quoterelay test suite.
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
import yaml

from quoterelay.data.models import UpdateRecord
from quoterelay.relay.fetcher import ProviderConfig
from quoterelay.relay.publisher import BrokerConfig
from quoterelay.settings import Settings


def make_response(status_code=200, json_data=None, json_error=None):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any QUOTERELAY_ variables inherited from the environment."""
    import os

    for name in list(os.environ):
        if name.upper().startswith("QUOTERELAY_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def test_settings(clean_env):
    """Complete settings pointing at fake endpoints."""
    return Settings(
        _env_file=None,
        api_key="test-key-1234",
        broker_url="http://broker.test/updates",
        provider_url="http://provider.test/query",
        symbols="AAPL,GOOGL,MSFT",
        interval_seconds=5,
        request_timeout=3,
        log_level="DEBUG",
    )


@pytest.fixture
def provider_config():
    return ProviderConfig(
        base_url="http://provider.test/query", api_key="test-key-1234", timeout=3
    )


@pytest.fixture
def broker_config():
    return BrokerConfig(url="http://broker.test/updates", timeout=3)


@pytest.fixture
def mock_session():
    """A requests.Session whose get/post return configurable responses."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def quote_payload():
    """A GLOBAL_QUOTE body as the provider sends it."""
    return {
        "Global Quote": {
            "01. symbol": "AAPL",
            "02. open": "187.1500",
            "03. high": "190.3200",
            "04. low": "186.9000",
            "05. price": "189.25",
            "06. volume": "51234567",
            "07. latest trading day": "2024-01-02",
            "08. previous close": "188.0100",
            "09. change": "1.2400",
            "10. change percent": "0.6595%",
        }
    }


@pytest.fixture
def sample_record():
    return UpdateRecord(
        symbol="GOOGL",
        price=138.5,
        observed_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def symbols_file(temp_dir):
    """YAML file listing tracked symbols."""
    path = temp_dir / "symbols.yml"
    with open(path, "w") as f:
        yaml.dump({"symbols": ["NVDA", " AMD ", "NVDA", "TSLA"]}, f)
    return path
