"""Day agenda models - raw per-day activity feeds from the trip provider."""

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from tripboard.models.common import WireModel


class LodgingRecord(WireModel):
    """Hotel stay entry for a day."""

    time: str | None = None
    title: str | None = None
    hotel_name: str | None = None


class AttractionRecord(WireModel):
    """Attraction visit entry for a day."""

    time: str | None = None
    title: str | None = None
    location: str | None = None


class TransportRecord(WireModel):
    """Transportation leg entry for a day."""

    time: str | None = None
    title: str | None = None
    origin: str | None = Field(default=None, validation_alias=AliasChoices("from", "origin"))
    destination: str | None = Field(
        default=None, validation_alias=AliasChoices("to", "destination")
    )


class Weather(WireModel):
    """Daily weather summary."""

    condition: str | None = None
    min_temp: float | None = None
    max_temp: float | None = None


class DayAgenda(WireModel):
    """One calendar day of a trip with its three activity feeds."""

    date: str
    summary: str | None = None
    image_url: str | None = None
    weather: Weather | None = None
    lodging: list[LodgingRecord] = Field(
        default_factory=list, validation_alias=AliasChoices("lodging", "hotel")
    )
    attractions: list[AttractionRecord] = Field(
        default_factory=list, validation_alias=AliasChoices("attractions", "attraction")
    )
    transports: list[TransportRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("transports", "transportation"),
    )

    @model_validator(mode="before")
    @classmethod
    def collect_flat_weather(cls, data: Any) -> Any:
        """Fold the backend's flat weather fields into a nested weather record."""
        if not isinstance(data, dict) or data.get("weather") is not None:
            return data
        flat = {
            "condition": data.get("weatherCondition"),
            "min_temp": data.get("minTemperature"),
            "max_temp": data.get("maxTemperature"),
        }
        if any(v is not None for v in flat.values()):
            data = {**data, "weather": flat}
        return data

    @field_validator("lodging", "attractions", "transports", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat a missing category list as empty."""
        return [] if v is None else v


class TripContext(WireModel):
    """Trip-level locations used to seed route inference."""

    trip_id: int | None = None
    origin_city: str | None = Field(
        default=None, validation_alias=AliasChoices("originCity", "fromCity", "origin_city")
    )
    origin_country: str | None = Field(
        default=None,
        validation_alias=AliasChoices("originCountry", "fromCountry", "origin_country"),
    )
    destination_city: str | None = Field(
        default=None,
        validation_alias=AliasChoices("destinationCity", "toCity", "destination_city"),
    )
    destination_country: str | None = Field(
        default=None,
        validation_alias=AliasChoices("destinationCountry", "toCountry", "destination_country"),
    )
