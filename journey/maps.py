"""
journey.maps — Place a pin for an entry's location name.

Rendering is left to the UI; this resolves a region and an optional
pin coordinate by forward-geocoding the stored location text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from journey.location import Coordinate, ForwardGeocoder

log = logging.getLogger(__name__)

DEFAULT_CENTER = Coordinate(latitude=37.7749, longitude=-122.4194)  # San Francisco
DEFAULT_SPAN = 0.05  # degrees, both axes


@dataclass(frozen=True)
class MapRegion:
    center: Coordinate = DEFAULT_CENTER
    latitude_delta: float = DEFAULT_SPAN
    longitude_delta: float = DEFAULT_SPAN


@dataclass(frozen=True)
class MapPin:
    location_name: Optional[str]
    region: MapRegion = MapRegion()
    coordinate: Optional[Coordinate] = None

    @property
    def has_pin(self) -> bool:
        return self.coordinate is not None


def resolve_map_pin(location_name: Optional[str], geocoder: ForwardGeocoder) -> MapPin:
    """Centre the map on *location_name* if it geocodes.

    With no name, a geocoding error, or no usable result, the default
    region is returned without a pin.
    """
    if not location_name:
        return MapPin(location_name=location_name)

    try:
        placemarks = geocoder.geocode(location_name)
    except Exception as exc:
        log.warning("Geocoding error for %r: %s", location_name, exc)
        return MapPin(location_name=location_name)

    for placemark in placemarks:
        if placemark.coordinate is not None:
            coord = placemark.coordinate
            return MapPin(
                location_name=location_name,
                region=MapRegion(center=coord),
                coordinate=coord,
            )

    log.info("No coordinate found for %r", location_name)
    return MapPin(location_name=location_name)
