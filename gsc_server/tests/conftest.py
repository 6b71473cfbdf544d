"""
Pytest Configuration and Shared Fixtures for the Search Console tool server.

Provides:
- Sample Search Analytics rows (query,page dimension keys)
- The default threshold profile
- A mocked webmasters v3 resource and a service wired to it
- Environment setup for settings/credentials tests
"""

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from gsc_server.core import config as config_module
from gsc_server.core import credentials as credentials_module
from gsc_server.models.schemas import QuickWinsThresholds
from gsc_server.services.search_console import SearchConsoleService


# ============================================================
# SAMPLE DATA FIXTURES
# ============================================================

def make_row(
    query: str = "running shoes",
    page: str = "https://www.example.com/shoes",
    clicks: float = 15,
    impressions: float = 1250,
    ctr: float = 0.012,
    position: float = 6.2,
) -> Dict[str, Any]:
    """Build one upstream-shaped Search Analytics row."""
    return {
        "keys": [query, page],
        "clicks": clicks,
        "impressions": impressions,
        "ctr": ctr,
        "position": position,
    }


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """
    A small mixed row set.

    - "running shoes": Medium win (48 additional clicks)
    - "trail shoes": High win (position 4.5, 3000 impressions)
    - "shoe laces": excluded, too few impressions
    - "buy shoes": excluded, already ranking top 3
    - "shoe store": excluded, CTR above 2%
    """
    return [
        make_row(),
        make_row(query="trail shoes", page="https://www.example.com/trail",
                 clicks=12, impressions=3000, ctr=0.004, position=4.5),
        make_row(query="shoe laces", page="https://www.example.com/laces",
                 clicks=1, impressions=40, ctr=0.01, position=5),
        make_row(query="buy shoes", page="https://www.example.com/",
                 clicks=5, impressions=900, ctr=0.0056, position=2.1),
        make_row(query="shoe store", page="https://www.example.com/store",
                 clicks=60, impressions=2000, ctr=0.03, position=7.0),
    ]


@pytest.fixture
def default_thresholds() -> QuickWinsThresholds:
    return QuickWinsThresholds()


# ============================================================
# MOCK API FIXTURES
# ============================================================

@pytest.fixture
def mock_webmasters() -> MagicMock:
    """
    Mocked webmasters v3 resource.

    Configure responses with, e.g.:
        mock_webmasters.searchanalytics.return_value.query.return_value.execute.return_value = {...}
    """
    return MagicMock(name="webmasters")


@pytest.fixture
def mock_search_console() -> MagicMock:
    """Mocked searchconsole v1 resource."""
    return MagicMock(name="searchconsole")


@pytest.fixture
def service(mock_webmasters, mock_search_console) -> SearchConsoleService:
    """SearchConsoleService wired to the mocked API resources."""
    return SearchConsoleService(
        write_access=True,
        webmasters=mock_webmasters,
        search_console=mock_search_console,
    )


def set_query_response(mock_webmasters: MagicMock, response: Dict[str, Any]) -> MagicMock:
    """Make searchanalytics().query(...).execute() return `response`."""
    query = mock_webmasters.searchanalytics.return_value.query
    query.return_value.execute.return_value = response
    return query


# ============================================================
# ENVIRONMENT FIXTURES
# ============================================================

@pytest.fixture
def credentials_env(monkeypatch, tmp_path):
    """
    Point GOOGLE_APPLICATION_CREDENTIALS at a temp path and reset the
    settings and credentials singletons before and after the test.
    """
    key_file = tmp_path / "service-account.json"
    key_file.write_text("{}")
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(key_file))
    monkeypatch.delenv("GSC_WRITE_ACCESS", raising=False)
    config_module.get_settings.cache_clear()
    credentials_module.reset_credentials()

    yield key_file

    config_module.get_settings.cache_clear()
    credentials_module.reset_credentials()
