"""
Radius search lifecycle for one feed session.

States:
- INACTIVE: No radius constraint (default)
- CENTER_SET: A center was located or picked, radius not yet applied
- ACTIVE: Radius applied; the feed only shows jobs inside it

Reset always returns to INACTIVE with the default center and radius.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from jobboard.errors import FilterStateError
from jobboard.filters.geo_filter import Coordinates, RadiusConstraint
from jobboard.geolocation import GeolocationProvider, parse_coordinates

logger = logging.getLogger(__name__)


class GeoCenter:
    """Current radius-search origin and radius, with their defaults."""

    def __init__(self, default_center: Sequence[float], default_radius_km: float):
        self.default_center: Coordinates = (float(default_center[0]), float(default_center[1]))
        self.default_radius_km = float(default_radius_km)
        self.center: Coordinates = self.default_center
        self.radius_km = self.default_radius_km

    @property
    def is_default(self) -> bool:
        return self.center == self.default_center and self.radius_km == self.default_radius_km

    def reset(self) -> None:
        self.center = self.default_center
        self.radius_km = self.default_radius_km

    def to_dict(self) -> Dict[str, Any]:
        return {'lon': self.center[0], 'lat': self.center[1], 'radius_km': self.radius_km}


class RadiusSearch:
    """State machine driving the radius part of the filter specification."""

    INACTIVE = "inactive"
    CENTER_SET = "center_set"
    ACTIVE = "active"

    def __init__(self, geo_center: GeoCenter):
        self.geo_center = geo_center
        self._state = self.INACTIVE

    @property
    def state(self) -> str:
        return self._state

    @property
    def constraint(self) -> Optional[RadiusConstraint]:
        """The radius filter to apply, only while ACTIVE."""
        if self._state != self.ACTIVE:
            return None
        return RadiusConstraint(center=self.geo_center.center, km=self.geo_center.radius_km)

    def set_center(self, lon: Any, lat: Any) -> Coordinates:
        """
        Move the search origin.

        INACTIVE/CENTER_SET move to CENTER_SET. An ACTIVE search stays
        ACTIVE and follows the new center.

        Raises:
            FilterStateError: If the coordinates are invalid
        """
        coords = parse_coordinates(lon, lat)
        if coords is None:
            raise FilterStateError(f"Invalid center coordinates: ({lon}, {lat})")

        self.geo_center.center = coords
        if self._state != self.ACTIVE:
            self._state = self.CENTER_SET
        logger.info(f"Radius center set to {coords}, state={self._state}")
        return coords

    def locate(self, provider: GeolocationProvider) -> bool:
        """
        Center the search on the user's position.

        Returns:
            True when a position was found; False leaves the state unchanged
        """
        try:
            coords = provider.get_current_position()
        except Exception as e:
            logger.error(f"Geolocation provider failed: {e}", exc_info=True)
            return False

        if coords is None:
            logger.warning(f"Geolocation unavailable, radius search stays {self._state}")
            return False

        self.set_center(coords[0], coords[1])
        return True

    def apply(self, km: Any = None) -> RadiusConstraint:
        """
        Confirm the radius and start filtering by distance.

        Args:
            km: Radius in kilometers (defaults to the current radius)

        Raises:
            FilterStateError: If km is not a positive number or no center is set
        """
        if km is None:
            km = self.geo_center.radius_km
        try:
            km = float(km)
        except (TypeError, ValueError):
            raise FilterStateError(f"Radius must be a number, got {km!r}")
        if not km > 0:
            raise FilterStateError("Radius must be greater than zero")
        if self.geo_center.center[0] == 0:
            raise FilterStateError("Locate yourself or pick a center before applying a radius")

        self.geo_center.radius_km = km
        self._state = self.ACTIVE
        logger.info(f"Radius search active: {km:g} km around {self.geo_center.center}")
        return self.constraint

    def snapshot(self) -> Tuple[str, Coordinates, float]:
        return self._state, self.geo_center.center, self.geo_center.radius_km

    def restore(self, snapshot: Tuple[str, Coordinates, float]) -> None:
        self._state, self.geo_center.center, self.geo_center.radius_km = snapshot

    def reset(self) -> None:
        """Clear the radius filter and restore the default center and radius."""
        self.geo_center.reset()
        self._state = self.INACTIVE
        logger.info("Radius search reset")

    def to_dict(self) -> Dict[str, Any]:
        return {'state': self._state, **self.geo_center.to_dict()}
