# ABOUTME: Shared test fixtures for the weather TUI test suite.
# ABOUTME: Provides mock HTTP client factories and canned OpenWeatherMap payloads.

from unittest.mock import AsyncMock

import httpx
import pytest


@pytest.fixture
def mock_client():
    """Factory for a mock httpx.AsyncClient whose get() returns a canned response."""

    def _make(json_data=None, status_code: int = 200, content: bytes | None = None) -> httpx.AsyncClient:
        mock = AsyncMock(spec=httpx.AsyncClient)
        request = httpx.Request("GET", "https://test")
        if content is not None:
            response = httpx.Response(status_code=status_code, content=content, request=request)
        else:
            response = httpx.Response(status_code=status_code, json=json_data, request=request)
        mock.get.return_value = response
        return mock

    return _make


@pytest.fixture
def paris_payload() -> dict:
    return {
        "coord": {"lon": 2.3488, "lat": 48.8534},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {"temp": 18.5, "feels_like": 17.9, "pressure": 1015, "humidity": 60},
        "name": "Paris",
        "cod": 200,
    }
