# ABOUTME: Pydantic BaseModels for weather readings, fetch outcomes, and provider payloads.
# ABOUTME: Defines the value types passed between the fetch service, the reducer, and the renderer.

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WeatherReading(BaseModel):
    """Current temperature for a resolved location, in Celsius."""

    model_config = ConfigDict(frozen=True)

    name: str
    temperature: float


class FailureKind(str, Enum):
    NETWORK = "network"
    DECODE = "decode"
    PROVIDER = "provider"


class FetchSuccess(BaseModel):
    """A completed lookup carrying a full reading."""

    model_config = ConfigDict(frozen=True)

    reading: WeatherReading


class FetchFailure(BaseModel):
    """A failed lookup with a human-readable cause."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str


FetchOutcome = FetchSuccess | FetchFailure


class MainData(BaseModel):
    """The `main` block of an OpenWeatherMap current weather response."""

    model_config = ConfigDict(extra="ignore")

    temp: float


class CityData(BaseModel):
    """Subset of the OpenWeatherMap current weather response we consume."""

    model_config = ConfigDict(extra="ignore")

    name: str
    main: MainData

    def to_reading(self) -> WeatherReading:
        return WeatherReading(name=self.name, temperature=self.main.temp)


class Viewport(BaseModel):
    """Terminal dimensions in cells."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=80, ge=0)
    height: int = Field(default=24, ge=0)
