"""
Thing (site) data models.

Schema is determined by the remote sensor API and propagates to the UI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .datastream import DataStream
from .fields import get_float, get_str, require_list, require_object


@dataclass(frozen=True)
class GeoPoint:
    """Location of a thing."""

    latitude: float = 0.0
    longitude: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> "GeoPoint":
        data = require_object(data, "location")
        return cls(
            latitude=get_float(data, "latitude"),
            longitude=get_float(data, "longitude"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class Thing:
    """A monitored site, as returned by the sites index."""

    id: str
    name: str = ""
    description: str = ""
    location: List[GeoPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Thing":
        """
        Decode a thing from its JSON object.

        Raises:
            DecodeError: If the object or one of its fields has the wrong type
        """
        data = require_object(data, "thing")
        raw_location = data.get("location")
        location = []
        if raw_location is not None:
            location = [GeoPoint.from_dict(p) for p in require_list(raw_location, "location")]
        return cls(
            id=get_str(data, "id"),
            name=get_str(data, "name"),
            description=get_str(data, "description"),
            location=location,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": [p.to_dict() for p in self.location],
        }


@dataclass(frozen=True)
class ThingWithDataStreams:
    """A thing joined with its datastreams, for populating the query editor."""

    thing: Thing
    data_streams: List[DataStream] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "thing": self.thing.to_dict(),
            "dataStreams": [ds.to_dict() for ds in self.data_streams],
        }
