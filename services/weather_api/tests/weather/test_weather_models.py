"""Tests for WeatherReading serialisation and decoding."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from services.weather_api.tests.helpers.providers import make_reading
from services.weather_api.weather.models import WeatherReading


class TestToJson:
    def test_keys_in_wire_order(self):
        body = make_reading().to_json()
        assert list(json.loads(body)) == [
            "temperature",
            "humidity",
            "windSpeed",
            "description",
            "location",
            "timestamp",
        ]

    def test_compact_separators(self):
        body = make_reading("paris").to_json()
        assert '"location":"paris"' in body
        assert ", " not in body

    def test_location_echoed_unmodified(self):
        body = make_reading(" New York ").to_json()
        assert json.loads(body)["location"] == " New York "


class TestFromJson:
    def test_decodes_to_equal_reading(self):
        reading = make_reading("tokyo")
        assert WeatherReading.from_json(reading.to_json()) == reading

    def test_non_json_rejected(self):
        with pytest.raises(ValidationError):
            WeatherReading.from_json("definitely not json")

    def test_json_array_rejected(self):
        with pytest.raises(ValidationError):
            WeatherReading.from_json("[1, 2, 3]")

    def test_missing_field_rejected(self):
        payload = json.loads(make_reading().to_json())
        del payload["windSpeed"]
        with pytest.raises(ValidationError):
            WeatherReading.from_json(json.dumps(payload))

    def test_empty_location_rejected(self):
        payload = json.loads(make_reading().to_json())
        payload["location"] = ""
        with pytest.raises(ValidationError):
            WeatherReading.from_json(json.dumps(payload))


    def test_string_number_rejected(self):
        payload = json.loads(make_reading().to_json())
        payload["temperature"] = "22.5"
        with pytest.raises(ValidationError):
            WeatherReading.from_json(json.dumps(payload))

    def test_bool_number_rejected(self):
        payload = json.loads(make_reading().to_json())
        payload["humidity"] = True
        with pytest.raises(ValidationError):
            WeatherReading.from_json(json.dumps(payload))

    def test_integer_number_accepted(self):
        payload = json.loads(make_reading().to_json())
        payload["windSpeed"] = 4
        assert WeatherReading.from_json(json.dumps(payload)).windSpeed == 4.0


class TestImmutability:
    def test_fields_cannot_be_reassigned(self):
        reading = make_reading()
        with pytest.raises(ValidationError):
            reading.temperature = 99.0
