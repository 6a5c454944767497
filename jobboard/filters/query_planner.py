"""
Query Planner - Decide what the store filters and what stays local

Category and location are exact-match fields the store can filter on.
Salary buckets and radius searches need per-record parsing and trigonometry,
so they are never pushed down. A free-text search forces a full scan of the
approved jobs because the text pass must see every candidate.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

from constants import PUSHABLE_FIELDS
from jobboard.filters.filter_state import FilterSpecification

logger = logging.getLogger(__name__)

RECENCY_ORDER = 'created_at desc'


@dataclass(frozen=True)
class FetchPlan:
    """Which equality filters go to the store, and whether it is a full scan."""
    server_filters: FrozenSet[Tuple[str, str]]
    needs_full_scan: bool
    order_by: str = RECENCY_ORDER

    @property
    def equality_filters(self) -> Dict[str, str]:
        return dict(self.server_filters)

    @property
    def pushed_fields(self) -> FrozenSet[str]:
        return frozenset(name for name, _value in self.server_filters)


def plan_fetch(spec: FilterSpecification) -> FetchPlan:
    """
    Build the minimal store fetch for a filter specification.

    Args:
        spec: Active filter criteria

    Returns:
        FetchPlan; needs_full_scan is True whenever a search term is present
        or no category/location constraint exists
    """
    if spec.search_term:
        logger.debug("Search term present, planning full scan")
        return FetchPlan(server_filters=frozenset(), needs_full_scan=True)

    pushed = frozenset(
        (name, getattr(spec, name))
        for name in PUSHABLE_FIELDS
        if getattr(spec, name)
    )

    if not pushed:
        return FetchPlan(server_filters=frozenset(), needs_full_scan=True)

    logger.debug(f"Pushing equality filters to store: {sorted(pushed)}")
    return FetchPlan(server_filters=pushed, needs_full_scan=False)


def execute_plan(plan: FetchPlan, store) -> List:
    """
    Fetch the candidate set described by a plan.

    Args:
        plan: Output of plan_fetch()
        store: Object exposing fetch_approved(equality_filters, order_by)

    Returns:
        Approved jobs ordered newest first

    Raises:
        FetchError: Propagated from the store
    """
    return store.fetch_approved(plan.equality_filters, order_by=plan.order_by)
