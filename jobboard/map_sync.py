"""
Map synchronization - keep map markers in step with the filtered feed.

The map SDK draws the markers; this side decides which markers exist.
Every filter pass calls sync() with the exact result list, including an
empty list, which clears all markers.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional, Sequence

from jobboard.filters.geo_filter import Coordinates, RadiusConstraint, resolve_coordinates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    job_id: str
    lon: float
    lat: float
    title: str


class MapSynchronizer(ABC):
    """Consumer of (jobs, center marker) after every filter pass."""

    @abstractmethod
    def sync(self, jobs: Sequence, center_marker: Optional[RadiusConstraint] = None) -> None:
        """Replace the visible markers with those for jobs."""


class MarkerRegistry(MapSynchronizer):
    """
    In-memory marker set serialized into API responses.

    Markers are keyed by job id and keep the feed order so cards and pins
    line up. Jobs that cannot be placed get no marker.
    """

    def __init__(self, canonical_locations: Optional[Mapping[str, Coordinates]] = None):
        self.canonical_locations = canonical_locations
        self.markers: Dict[str, Marker] = {}
        self.center_marker: Optional[RadiusConstraint] = None
        self.sync_count = 0

    def sync(self, jobs: Sequence, center_marker: Optional[RadiusConstraint] = None) -> None:
        self.markers = {}
        for job in jobs:
            coords = resolve_coordinates(job, self.canonical_locations)
            if coords is None:
                continue
            self.markers[job.job_id] = Marker(
                job_id=job.job_id, lon=coords[0], lat=coords[1], title=job.title
            )
        self.center_marker = center_marker
        self.sync_count += 1
        logger.debug(f"Map synced: {len(self.markers)} markers from {len(jobs)} jobs")

    def marker_for(self, job_id: str) -> Optional[Marker]:
        return self.markers.get(job_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'markers': [asdict(marker) for marker in self.markers.values()],
            'center': self.center_marker.to_dict() if self.center_marker else None,
        }
