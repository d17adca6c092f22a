"""
Unit Tests for the Variable Registry
=====================================
"""

import pytest

from climate_odds.core.exceptions import UnknownVariableError
from climate_odds.domain.variables import (
    VARIABLE_REGISTRY,
    VariableSpec,
    get_variable,
    kelvin_to_celsius,
    list_variables,
)


@pytest.mark.unit
class TestVariableRegistry:

    def test_known_variables(self):
        assert set(VARIABLE_REGISTRY) == {
            "temperature", "precipitation", "windspeed", "humidity", "dust"
        }

    def test_temperature_converts_kelvin_to_celsius(self):
        temperature = get_variable("temperature")

        assert temperature.units == "K"
        assert temperature.display_units == "°C"
        assert temperature.convert(293.15) == pytest.approx(20.0)
        assert kelvin_to_celsius(273.15) == 0.0

    def test_other_variables_use_identity(self):
        precipitation = get_variable("precipitation")

        assert precipitation.convert(12.5) == 12.5

    def test_unknown_variable(self):
        with pytest.raises(UnknownVariableError) as exc_info:
            get_variable("snowfall")

        assert exc_info.value.details == {"variable": "snowfall"}

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            VARIABLE_REGISTRY["snowfall"] = VariableSpec("snowfall", "sf", "cm", "cm", "Snow")

    def test_list_variables_shows_display_units(self):
        variables = {v["name"]: v for v in list_variables()}

        assert variables["temperature"] == {
            "name": "temperature",
            "code": "t2m",
            "units": "°C",
            "description": "2-meter air temperature",
        }
        assert variables["dust"]["units"] == "kg/m²"
