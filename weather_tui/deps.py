# ABOUTME: Dependency container for the weather fetch using Pydantic BaseModel.
# ABOUTME: Holds the single httpx.AsyncClient and credential shared by every lookup.

import httpx
from pydantic import BaseModel, ConfigDict

from weather_tui.config import Settings
from weather_tui.models import FetchOutcome
from weather_tui.weather_service import CURRENT_WEATHER_URL, fetch_weather


class WeatherDeps(BaseModel):
    """Dependencies handed to the app for issuing weather lookups."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    api_key: str
    api_url: str = CURRENT_WEATHER_URL

    async def fetch(self, query: str) -> FetchOutcome:
        return await fetch_weather(self.http_client, self.api_key, query, url=self.api_url)

    async def aclose(self) -> None:
        await self.http_client.aclose()


def create_http_client(timeout: float) -> httpx.AsyncClient:
    """Create an httpx client with a single request deadline and no retries."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))


def create_deps(settings: Settings) -> WeatherDeps:
    return WeatherDeps(
        http_client=create_http_client(settings.timeout),
        api_key=settings.api_key,
        api_url=settings.api_url,
    )
