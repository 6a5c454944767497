"""
Tests for reading filter state and planning the store fetch.
"""

from unittest.mock import Mock

import pytest

from jobboard.errors import FilterStateError
from jobboard.filters import (
    FilterSpecification,
    RadiusConstraint,
    execute_plan,
    plan_fetch,
    read_filter_state,
)
from jobboard.filters.query_planner import RECENCY_ORDER


# ===== FILTER STATE =====

def test_read_filter_state_trims_and_lowercases():
    spec = read_filter_state({
        "category": "  ",
        "location": " Lagos ",
        "salary": "300k+",
        "q": "  Engineer ",
    })

    assert spec.category is None
    assert spec.location == "Lagos"
    assert spec.salary_bucket == "300k+"
    assert spec.search_term == "engineer"
    assert spec.radius is None


def test_read_filter_state_accepts_alternate_keys():
    spec = read_filter_state({"search": "Paystack", "salary_bucket": "1M+"})
    assert spec.search_term == "paystack"
    assert spec.salary_bucket == "1M+"


def test_empty_input_has_no_constraints():
    assert read_filter_state({}).is_empty
    assert not read_filter_state({"location": "Abuja"}).is_empty


def test_radius_is_attached():
    radius = RadiusConstraint(center=(3.42, 6.44), km=20)
    spec = read_filter_state({}, radius=radius)
    assert spec.radius == radius
    assert not spec.is_empty


def test_bad_salary_bucket_is_filter_state_error():
    with pytest.raises(FilterStateError, match="Unrecognized salary bucket"):
        read_filter_state({"salary": "lots"})


def test_spec_to_dict():
    spec = FilterSpecification(location="Lagos", salary_bucket="300k+")
    assert spec.to_dict() == {
        "category": None,
        "location": "Lagos",
        "salary": "300k+",
        "q": None,
        "radius": None,
    }


# ===== PLANNING =====

def test_no_constraints_is_full_scan():
    plan = plan_fetch(FilterSpecification())
    assert plan.needs_full_scan is True
    assert plan.equality_filters == {}
    assert plan.order_by == RECENCY_ORDER


def test_category_is_pushed_down():
    plan = plan_fetch(FilterSpecification(category="IT"))
    assert plan.needs_full_scan is False
    assert plan.equality_filters == {"category": "IT"}
    assert plan.pushed_fields == {"category"}


def test_category_and_location_are_both_pushed():
    plan = plan_fetch(FilterSpecification(category="IT", location="Lagos"))
    assert plan.equality_filters == {"category": "IT", "location": "Lagos"}


def test_search_term_forces_full_scan():
    plan = plan_fetch(FilterSpecification(category="IT", location="Lagos", search_term="eng"))
    assert plan.needs_full_scan is True
    assert plan.equality_filters == {}


def test_salary_and_radius_are_never_pushed():
    spec = FilterSpecification(
        salary_bucket="300k+",
        radius=RadiusConstraint(center=(3.42, 6.44), km=20),
    )
    plan = plan_fetch(spec)
    assert plan.needs_full_scan is True
    assert plan.equality_filters == {}


def test_execute_plan_calls_store():
    store = Mock()
    store.fetch_approved.return_value = ["job"]

    plan = plan_fetch(FilterSpecification(location="Lagos"))
    assert execute_plan(plan, store) == ["job"]
    store.fetch_approved.assert_called_once_with({"location": "Lagos"}, order_by="created_at desc")
