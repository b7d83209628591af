from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .validators import require_mapping, require_number


@dataclass(frozen=True)
class GeoPoint:
    """A location held as a ``(longitude, latitude)`` pair.

    This is the axis order of GeoJSON and of ``POINT(x y)`` in MySQL. Clients
    speak ``{latitude, longitude}``; ``from_dict``/``to_dict`` do the flip.
    """

    longitude: float
    latitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    @classmethod
    def from_coordinates(cls, coordinates) -> "GeoPoint":
        longitude, latitude = coordinates
        return cls(longitude=float(longitude), latitude=float(latitude))

    @classmethod
    def from_dict(cls, value: Any, field_name: str = "location") -> "GeoPoint":
        data = require_mapping(value, field_name)
        return cls(
            longitude=require_number(data.get("longitude"), f"{field_name}.longitude"),
            latitude=require_number(data.get("latitude"), f"{field_name}.latitude"),
        )

    @classmethod
    def from_optional_dict(cls, value: Any, field_name: str = "location") -> Optional["GeoPoint"]:
        if value is None:
            return None
        return cls.from_dict(value, field_name)

    def to_wkt(self) -> str:
        return f"POINT({self.longitude!r} {self.latitude!r})"

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}
