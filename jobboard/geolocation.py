"""
Geolocation providers.

A provider answers "where is the user?" with a (lon, lat) pair, or None
when the position is unavailable (permission denied, timeout, unsupported).
Providers never raise for those cases, so callers can treat None as
"leave the radius search as it is".
"""

import logging
import math
from typing import Any, Optional

import requests

from constants import GEOLOCATION_TIMEOUT
from jobboard.filters.geo_filter import Coordinates

logger = logging.getLogger(__name__)


def parse_coordinates(lon: Any, lat: Any) -> Optional[Coordinates]:
    """Validate a lon/lat pair; returns None for anything out of range."""
    try:
        lon = float(lon)
        lat = float(lat)
    except (TypeError, ValueError):
        return None
    if math.isnan(lon) or math.isnan(lat):
        return None
    if not (-180 <= lon <= 180 and -90 <= lat <= 90):
        return None
    return lon, lat


class GeolocationProvider:
    """Base class for position sources."""

    def get_current_position(self) -> Optional[Coordinates]:
        raise NotImplementedError


class StaticGeolocationProvider(GeolocationProvider):
    """Position reported by the browser and posted along with the request."""

    def __init__(self, lon: Any = None, lat: Any = None):
        self.coords = parse_coordinates(lon, lat)

    def get_current_position(self) -> Optional[Coordinates]:
        if self.coords is None:
            logger.warning("Client did not report a usable position")
        return self.coords


class IpGeolocationProvider(GeolocationProvider):
    """
    Approximate position from an IP geolocation service.

    The service must answer JSON containing "lat" and "lon" (or
    "latitude"/"longitude").
    """

    def __init__(self, url: str, ip_address: Optional[str] = None,
                 timeout: float = GEOLOCATION_TIMEOUT):
        self.url = url
        self.ip_address = ip_address
        self.timeout = timeout

    def get_current_position(self) -> Optional[Coordinates]:
        if not self.url:
            logger.warning("IP geolocation is not configured")
            return None

        url = self.url
        if self.ip_address:
            url = f"{url.rstrip('/')}/{self.ip_address}"

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout:
            logger.warning(f"Geolocation lookup timed out after {self.timeout}s")
            return None
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Geolocation lookup failed: {e}")
            return None

        if not isinstance(payload, dict):
            logger.warning("Geolocation lookup returned an unexpected payload")
            return None

        coords = parse_coordinates(
            payload.get('lon', payload.get('longitude')),
            payload.get('lat', payload.get('latitude')),
        )
        if coords is None:
            logger.warning("Geolocation lookup returned no coordinates")
        return coords
