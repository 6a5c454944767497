"""
Feed sessions - run the filter pipeline for one browsing session.

A FeedSession owns everything that used to be page-level state: the radius
search and its GeoCenter, the map markers and the pass counter. Each
refresh runs:

    read_filter_state -> plan_fetch -> execute_plan -> evaluate -> map sync

and is tagged with a generation number. When a newer pass has started by
the time an older one finishes, the older result is dropped. Search-as-you-type
passes first wait out the debounce delay and give up without fetching when a
newer pass starts in the meantime.
"""

import itertools
import threading
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from constants import (
    CANONICAL_LOCATIONS,
    DEFAULT_CENTER,
    DEFAULT_RADIUS_KM,
    MAX_FEED_SESSIONS,
    SEARCH_DEBOUNCE_MS,
)
from jobboard.errors import JobBoardError, StalePassError
from jobboard.filters import (
    FetchPlan,
    FilterSpecification,
    evaluate,
    execute_plan,
    plan_fetch,
    read_filter_state,
)
from jobboard.filters.geo_filter import Coordinates
from jobboard.logging_config import LogContext, get_logger
from jobboard.map_sync import MarkerRegistry
from jobboard.radius import GeoCenter, RadiusSearch

logger = get_logger(__name__)


@dataclass
class FeedResult:
    """Outcome of one filter pass."""
    generation: int
    jobs: List
    spec: FilterSpecification
    plan: FetchPlan
    map: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generation': self.generation,
            'count': len(self.jobs),
            'jobs': [job.to_dict() for job in self.jobs],
            'filters': self.spec.to_dict(),
            'full_scan': self.plan.needs_full_scan,
            'map': self.map,
        }


class FeedSession:
    """Filter state and pipeline for one client."""

    def __init__(
        self,
        default_center: Sequence[float] = DEFAULT_CENTER,
        default_radius_km: float = DEFAULT_RADIUS_KM,
        canonical_locations: Optional[Mapping[str, Coordinates]] = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
    ):
        if canonical_locations is None:
            canonical_locations = dict(CANONICAL_LOCATIONS)
        self.canonical_locations = canonical_locations
        self.radius = RadiusSearch(GeoCenter(default_center, default_radius_km))
        self.markers = MarkerRegistry(canonical_locations)
        self.debounce_delay = debounce_ms / 1000.0
        self.last_result: Optional[FeedResult] = None
        self._counter = itertools.count(1)
        self._latest = 0
        # Guards the generation counter and everything a pass publishes
        self._lock = threading.Lock()
        self._pass_started = threading.Condition(self._lock)

    @classmethod
    def from_config(cls, config) -> 'FeedSession':
        return cls(
            default_center=config.default_center,
            default_radius_km=config.default_radius_km,
            canonical_locations=config.canonical_locations,
            debounce_ms=config.search_debounce_ms,
        )

    # ===== PASS SEQUENCING =====

    @property
    def latest_generation(self) -> int:
        return self._latest

    def begin_pass(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            self._pass_started.notify_all()
            return self._latest

    def is_current(self, generation: int) -> bool:
        return generation == self._latest

    def wait_for_quiet(self, generation: int) -> bool:
        """
        Wait out the debounce delay for a pass.

        Returns:
            True when no newer pass started during the delay
        """
        with self._pass_started:
            superseded = self._pass_started.wait_for(
                lambda: not self.is_current(generation),
                timeout=self.debounce_delay,
            )
        return not superseded

    def complete_pass(self, generation: int, jobs: List, spec: FilterSpecification,
                      plan: FetchPlan) -> FeedResult:
        """
        Publish a finished pass to the map and the session.

        Raises:
            StalePassError: If a newer pass started after this one
        """
        with self._lock:
            if not self.is_current(generation):
                raise StalePassError(generation, self._latest)

            self.markers.sync(jobs, spec.radius)
            result = FeedResult(
                generation=generation,
                jobs=jobs,
                spec=spec,
                plan=plan,
                map=self.markers.to_dict(),
            )
            self.last_result = result
        return result

    # ===== PIPELINE =====

    def refresh(self, store, params: Optional[Mapping[str, Any]] = None,
                debounce: bool = False) -> Optional[FeedResult]:
        """
        Run one filter pass.

        Args:
            store: Job store exposing fetch_approved()
            params: Raw filter input (category, location, salary, q)
            debounce: Wait for typing to pause before fetching

        Returns:
            FeedResult, or None when a newer pass superseded this one

        Raises:
            FilterStateError: If the filter input is malformed
            FetchError: If the store cannot be read
        """
        generation = self.begin_pass()

        with LogContext(logger, generation=generation):
            if debounce and not self.wait_for_quiet(generation):
                logger.debug(f"Search pass {generation} superseded while debouncing")
                return None

            spec = read_filter_state(params or {}, radius=self.radius.constraint)
            plan = plan_fetch(spec)
            candidates = execute_plan(plan, store)
            jobs = evaluate(candidates, spec, plan, self.canonical_locations)

            try:
                result = self.complete_pass(generation, jobs, spec, plan)
            except StalePassError as e:
                logger.debug(f"Discarding stale result: {e}")
                return None

            logger.info(
                f"Filter pass {generation}: {len(candidates)} candidates -> {len(jobs)} jobs "
                f"(full_scan={plan.needs_full_scan})"
            )
            return result

    @contextmanager
    def radius_change(self) -> Iterator[RadiusSearch]:
        """Roll the radius search back when the block raises a JobBoardError."""
        saved = self.radius.snapshot()
        try:
            yield self.radius
        except JobBoardError:
            self.radius.restore(saved)
            logger.info(f"Radius search rolled back to {self.radius.state}")
            raise

    def reset(self, store) -> Optional[FeedResult]:
        """Drop every filter, restore the default center, and refresh."""
        self.radius.reset()
        return self.refresh(store, {})


class SessionRegistry:
    """
    Per-client FeedSession objects, created on first use.

    At most max_sessions are kept; the least recently used one is dropped
    to make room. Callers without a session id get a fresh session that is
    never stored, so anonymous clients never share radius state.
    """

    def __init__(self, factory: Callable[[], FeedSession], max_sessions: int = MAX_FEED_SESSIONS):
        self._factory = factory
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, FeedSession]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str]) -> FeedSession:
        if not session_id:
            return self._factory()

        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                return session

            session = self._factory()
            self._sessions[session_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug(f"Evicted feed session {evicted}")
            logger.debug(f"Created feed session {session_id}")
            return session

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
