"""
Climate Variable Registry
=========================

Variables that can be queried, with their native units (as served by the
data sources), display units and the conversion applied to every fetched
value before it becomes a Sample.

Codes follow the MERRA-2 / GPM short names.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping

from climate_odds.core.exceptions import UnknownVariableError

KELVIN_OFFSET = 273.15


def kelvin_to_celsius(value: float) -> float:
    return value - KELVIN_OFFSET


def identity(value: float) -> float:
    return value


@dataclass(frozen=True)
class VariableSpec:
    """Metadata of one queryable variable."""
    name: str
    code: str
    units: str
    display_units: str
    description: str
    convert: Callable[[float], float] = identity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "code": self.code,
            "units": self.display_units,
            "description": self.description,
        }


VARIABLE_REGISTRY: Mapping[str, VariableSpec] = MappingProxyType({
    spec.name: spec for spec in (
        VariableSpec(
            name="temperature",
            code="t2m",
            units="K",
            display_units="°C",
            description="2-meter air temperature",
            convert=kelvin_to_celsius,
        ),
        VariableSpec(
            name="precipitation",
            code="precip",
            units="mm/day",
            display_units="mm/day",
            description="Daily precipitation",
        ),
        VariableSpec(
            name="windspeed",
            code="wnd10m",
            units="m/s",
            display_units="m/s",
            description="10-meter wind speed",
        ),
        VariableSpec(
            name="humidity",
            code="rh2m",
            units="%",
            display_units="%",
            description="2-meter relative humidity",
        ),
        VariableSpec(
            name="dust",
            code="dust",
            units="kg/m^2",
            display_units="kg/m²",
            description="Dust aerosol optical depth",
        ),
    )
})


def get_variable(name: str) -> VariableSpec:
    """
    Look up a variable by identifier.

    Raises:
        UnknownVariableError: If the variable is not registered
    """
    try:
        return VARIABLE_REGISTRY[name]
    except KeyError:
        raise UnknownVariableError(name) from None


def list_variables() -> List[Dict[str, Any]]:
    """Public description of every registered variable."""
    return [spec.to_dict() for spec in VARIABLE_REGISTRY.values()]
