"""
Geo Filter - Great-circle distance and radius membership

Coordinates are (longitude, latitude) pairs, the order the map SDK uses.
Jobs are placed either from their explicit latitude/longitude or from the
canonical-location table; jobs that resolve to nothing are never inside a
radius but remain eligible for every other filter.
"""

import math
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from constants import CANONICAL_LOCATIONS, EARTH_RADIUS_KM

logger = logging.getLogger(__name__)

Coordinates = Tuple[float, float]  # (lon, lat)


@dataclass(frozen=True)
class RadiusConstraint:
    """Active radius search: center (lon, lat) and distance in km."""
    center: Coordinates
    km: float

    def to_dict(self) -> Dict[str, float]:
        return {'lon': self.center[0], 'lat': self.center[1], 'radius_km': self.km}


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points on a 6371 km sphere.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in kilometers
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    lat1 = math.radians(lat1)
    lat2 = math.radians(lat2)

    a = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def resolve_coordinates(
    job,
    canonical_locations: Optional[Mapping[str, Coordinates]] = None,
) -> Optional[Coordinates]:
    """
    Find where a job sits on the map.

    Args:
        job: Job with optional latitude/longitude and a location name
        canonical_locations: Lowercase name -> (lon, lat) table

    Returns:
        (lon, lat), or None when the job cannot be placed
    """
    if job.latitude is not None and job.longitude is not None:
        return float(job.longitude), float(job.latitude)

    if canonical_locations is None:
        canonical_locations = CANONICAL_LOCATIONS

    if job.location:
        return canonical_locations.get(job.location.strip().lower())

    return None


def is_within_radius(
    job_coords: Optional[Coordinates],
    center: Optional[Coordinates],
    radius_km: float,
) -> bool:
    """
    Check whether a point lies within radius_km of center (inclusive).

    A missing point or an unset center (longitude 0) never matches.
    """
    if job_coords is None or center is None or center[0] == 0:
        return False

    distance = haversine_km(center[1], center[0], job_coords[1], job_coords[0])
    return distance <= radius_km
