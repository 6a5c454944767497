"""
Filter State - Snapshot the active filter criteria

Turns raw filter input (query-string values, form fields) into an immutable
FilterSpecification. Empty or whitespace-only values mean "no constraint".
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from jobboard.errors import FilterStateError
from jobboard.filters.geo_filter import RadiusConstraint
from jobboard.filters.salary_filter import SalaryBucket, parse_filter_bucket

logger = logging.getLogger(__name__)

# Accepted input names for each axis
SEARCH_KEYS = ('q', 'search', 'search_term')
SALARY_KEYS = ('salary', 'salary_bucket')


@dataclass(frozen=True)
class FilterSpecification:
    """Immutable set of criteria for one filtering pass."""
    category: Optional[str] = None
    location: Optional[str] = None
    salary_bucket: Optional[str] = None
    search_term: Optional[str] = None  # always lowercase
    radius: Optional[RadiusConstraint] = None

    @property
    def is_empty(self) -> bool:
        return not any((self.category, self.location, self.salary_bucket,
                        self.search_term, self.radius))

    @property
    def salary_range(self) -> Optional[SalaryBucket]:
        if not self.salary_bucket:
            return None
        return parse_filter_bucket(self.salary_bucket)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'location': self.location,
            'salary': self.salary_bucket,
            'q': self.search_term,
            'radius': self.radius.to_dict() if self.radius else None,
        }


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _first(params: Mapping[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = _clean(params.get(key))
        if value:
            return value
    return None


def read_filter_state(
    params: Mapping[str, Any],
    radius: Optional[RadiusConstraint] = None,
) -> FilterSpecification:
    """
    Build a FilterSpecification from raw filter input.

    Args:
        params: Mapping with any of category, location, salary, q
        radius: Active radius constraint owned by the caller's session

    Returns:
        FilterSpecification snapshot

    Raises:
        FilterStateError: If the salary bucket cannot be parsed
    """
    salary_bucket = _first(params, SALARY_KEYS)
    if salary_bucket:
        try:
            parse_filter_bucket(salary_bucket)
        except ValueError as e:
            raise FilterStateError(str(e), cause=e) from e

    search_term = _first(params, SEARCH_KEYS)

    spec = FilterSpecification(
        category=_clean(params.get('category')),
        location=_clean(params.get('location')),
        salary_bucket=salary_bucket,
        search_term=search_term.lower() if search_term else None,
        radius=radius,
    )
    logger.debug(f"Filter state: {spec.to_dict()}")
    return spec
