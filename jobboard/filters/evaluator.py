"""
Filter Evaluator - Apply every client-side predicate to a candidate set

Predicates run in a fixed order: category/location equality (only for axes
the store did not already filter), salary bucket, radius, free text. A job
is kept only if all active predicates pass. The candidate order, newest
first from the store, is preserved.
"""

import logging
from typing import Iterable, List, Mapping, Optional

from jobboard.filters.filter_state import FilterSpecification
from jobboard.filters.geo_filter import Coordinates, is_within_radius, resolve_coordinates
from jobboard.filters.query_planner import FetchPlan
from jobboard.filters.salary_filter import salary_in_bucket

logger = logging.getLogger(__name__)


def matches_search_term(job, search_term: str) -> bool:
    """Case-insensitive substring match against title, company or location."""
    for text in (job.title, job.company, job.location):
        if text and search_term in text.lower():
            return True
    return False


def evaluate(
    candidates: Iterable,
    spec: FilterSpecification,
    plan: Optional[FetchPlan] = None,
    canonical_locations: Optional[Mapping[str, Coordinates]] = None,
) -> List:
    """
    Filter candidates down to the jobs matching spec.

    Args:
        candidates: Jobs from the store, newest first
        spec: Active filter criteria
        plan: Plan used for the fetch; axes it pushed are not re-checked.
            Without a plan every axis is checked locally.
        canonical_locations: Lowercase name -> (lon, lat) table

    Returns:
        New list with the matching jobs in their original order
    """
    pushed = plan.pushed_fields if plan is not None else frozenset()
    check_category = spec.category and 'category' not in pushed
    check_location = spec.location and 'location' not in pushed

    bucket = spec.salary_range
    radius = spec.radius
    search_term = spec.search_term.lower() if spec.search_term else None

    results = []
    for job in candidates:
        if check_category and job.category != spec.category:
            continue
        if check_location and job.location != spec.location:
            continue
        if bucket is not None and not salary_in_bucket(job.salary, bucket):
            continue
        if radius is not None:
            coords = resolve_coordinates(job, canonical_locations)
            if not is_within_radius(coords, radius.center, radius.km):
                continue
        if search_term and not matches_search_term(job, search_term):
            continue
        results.append(job)

    return results
