"""
Datastream data models.

A datastream is one measurable quantity (e.g. water temperature) at a thing.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from .fields import get_str, require_object


@dataclass(frozen=True)
class UnitOfMeasurement:
    """Unit of a datastream's values."""

    name: str = ""
    symbol: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "UnitOfMeasurement":
        data = require_object(data, "unitOfMeasurement")
        return cls(name=get_str(data, "name"), symbol=get_str(data, "symbol"))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "symbol": self.symbol}


@dataclass(frozen=True)
class DataStream:
    """Datastream belonging to a thing."""

    id: str
    name: str = ""
    description: str = ""
    unit_of_measurement: UnitOfMeasurement = field(default_factory=UnitOfMeasurement)

    @classmethod
    def from_dict(cls, data: Any) -> "DataStream":
        """
        Decode a datastream from its JSON object.

        Raises:
            DecodeError: If the object or one of its fields has the wrong type
        """
        data = require_object(data, "datastream")
        unit = data.get("unitOfMeasurement")
        return cls(
            id=get_str(data, "id"),
            name=get_str(data, "name"),
            description=get_str(data, "description"),
            unit_of_measurement=(
                UnitOfMeasurement.from_dict(unit) if unit is not None else UnitOfMeasurement()
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "unitOfMeasurement": self.unit_of_measurement.to_dict(),
        }
