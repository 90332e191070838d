# ABOUTME: Service layer for OpenWeatherMap current weather calls and response parsing.
# ABOUTME: Turns one free-text query into exactly one FetchOutcome, never raising for I/O failures.

import logging

import httpx
from pydantic import ValidationError

from weather_tui.models import CityData, FailureKind, FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger(__name__)

CURRENT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
UNITS = "metric"


def build_params(query: str, api_key: str) -> dict[str, str]:
    """Query parameters for a current weather lookup by city name."""
    return {"q": query, "units": UNITS, "APPID": api_key}


async def fetch_weather(
    client: httpx.AsyncClient,
    api_key: str,
    query: str,
    url: str = CURRENT_WEATHER_URL,
) -> FetchOutcome:
    """Fetch the current temperature for `query` from OpenWeatherMap.

    Transport errors, undecodable bodies and provider-reported errors are all
    returned as FetchFailure values so the caller only ever sees one outcome.
    """
    logger.debug("Fetching weather for %r", query)
    try:
        resp = await client.get(url, params=build_params(query, api_key))
    except httpx.HTTPError as e:
        logger.info("Weather request for %r failed: %s", query, e)
        return FetchFailure(kind=FailureKind.NETWORK, message=_describe_transport_error(e))

    outcome = parse_weather_response(resp)
    logger.info("Weather lookup for %r finished: %s", query, _outcome_label(outcome))
    return outcome


def parse_weather_response(resp: httpx.Response) -> FetchOutcome:
    """Classify an HTTP response as a reading or a decode/provider failure."""
    try:
        data = resp.json()
    except ValueError as e:
        if not resp.is_success:
            return FetchFailure(kind=FailureKind.PROVIDER, message=f"HTTP {resp.status_code}")
        return FetchFailure(kind=FailureKind.DECODE, message=f"invalid JSON in response: {e}")

    if not isinstance(data, dict):
        return FetchFailure(kind=FailureKind.DECODE, message="response body is not a JSON object")

    message = provider_error(data)
    if message:
        return FetchFailure(kind=FailureKind.PROVIDER, message=message)
    if not resp.is_success:
        return FetchFailure(kind=FailureKind.PROVIDER, message=f"HTTP {resp.status_code}")

    return parse_weather_payload(data)


def parse_weather_payload(data: dict) -> FetchOutcome:
    """Validate a decoded response body into a reading."""
    try:
        city = CityData.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return FetchFailure(kind=FailureKind.DECODE, message=f"unexpected response shape ({fields})")
    return FetchSuccess(reading=city.to_reading())


def provider_error(data: dict) -> str | None:
    """Return the provider's error message if the body carries one.

    Any non-empty `message` field is treated as a failure, even on a 200.
    """
    message = data.get("message")
    if message is None:
        return None
    text = str(message).strip()
    return text or None


def _describe_transport_error(e: httpx.HTTPError) -> str:
    if isinstance(e, httpx.TimeoutException):
        return "request timed out"
    detail = str(e) or type(e).__name__
    return f"network error: {detail}"


def _outcome_label(outcome: FetchOutcome) -> str:
    if isinstance(outcome, FetchSuccess):
        return "success"
    return outcome.kind.value
