"""User location capability, injected into report filtering."""
from typing import Optional, Protocol

from oceanwatch.config import settings
from oceanwatch.models.filters import GeoPoint


class LocationProvider(Protocol):
    def current_location(self) -> Optional[GeoPoint]:
        ...


class StaticLocationProvider:
    """Fixed location, or none at all (geolocation unavailable/denied)."""

    def __init__(self, location: Optional[GeoPoint] = None) -> None:
        self._location = location

    def current_location(self) -> Optional[GeoPoint]:
        return self._location


def location_provider_from_settings() -> StaticLocationProvider:
    if settings.default_user_lat is None or settings.default_user_lng is None:
        return StaticLocationProvider(None)
    return StaticLocationProvider(
        GeoPoint(lat=settings.default_user_lat, lng=settings.default_user_lng)
    )
