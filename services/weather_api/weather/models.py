"""
WeatherReading: the value cached per location and returned to clients.

Wire format (compact JSON, keys in this order):
  {"temperature":22.5,"humidity":65.0,"windSpeed":12.0,
   "description":"Partly cloudy","location":"paris","timestamp":"2026-10-19T12:00:00Z"}

Field names are camelCase on the wire and on the model, matching the JSON
consumers already parse.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class WeatherReading(BaseModel):
    """Current weather for one location. Immutable once constructed."""

    temperature: float
    humidity: float
    windSpeed: float
    description: str
    location: str = Field(min_length=1)
    timestamp: str

    model_config = {"frozen": True}

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str | bytes) -> WeatherReading:
        """
        Decode a stored value. Raises pydantic.ValidationError if it is not a reading.

        Strict: numbers must be JSON numbers, strings must be JSON strings.
        """
        return cls.model_validate_json(raw, strict=True)

