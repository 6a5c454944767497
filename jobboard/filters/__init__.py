"""
Filters Package - Job filtering and geospatial search

This package turns a filter specification plus a job collection into the
filtered, recency-ordered result list shown in the feed and on the map.

- Salary filter: Normalize free-form salaries and match them against buckets
- Geo filter: Haversine distance and radius membership
- Filter state: Immutable snapshot of the active criteria
- Query planner: Split criteria between the store and the local pass
- Evaluator: Apply the local predicates in order
"""

from .salary_filter import (
    SalaryBucket,
    normalize_salary_to_minimum,
    parse_filter_bucket,
    salary_in_bucket,
    format_bucket_label,
)
from .geo_filter import (
    RadiusConstraint,
    haversine_km,
    resolve_coordinates,
    is_within_radius,
)
from .filter_state import (
    FilterSpecification,
    read_filter_state,
)
from .query_planner import (
    FetchPlan,
    plan_fetch,
    execute_plan,
)
from .evaluator import (
    evaluate,
    matches_search_term,
)

__all__ = [
    # Salary filter
    'SalaryBucket',
    'normalize_salary_to_minimum',
    'parse_filter_bucket',
    'salary_in_bucket',
    'format_bucket_label',
    # Geo filter
    'RadiusConstraint',
    'haversine_km',
    'resolve_coordinates',
    'is_within_radius',
    # Filter state
    'FilterSpecification',
    'read_filter_state',
    # Query planner
    'FetchPlan',
    'plan_fetch',
    'execute_plan',
    # Evaluator
    'evaluate',
    'matches_search_term',
]
