"""
Feed Routes Blueprint - Filtered job feed, radius search and map markers

Every endpoint that changes the filter state re-runs the whole pipeline and
answers with the filtered jobs plus the marker set for the map, so cards
and pins always come from the same list.
"""

import logging
from flask import Blueprint, jsonify, request

from jobboard.filters import format_bucket_label, parse_filter_bucket
from jobboard.geolocation import IpGeolocationProvider, StaticGeolocationProvider
from jobboard.routes.helpers import get_board_config, get_feed_session, get_store, json_body

logger = logging.getLogger(__name__)

feed_bp = Blueprint("feed", __name__)


def _feed_response(session, result):
    """Serialize a pass; a superseded pass answers 409 so the client keeps the newer list."""
    if result is None:
        return jsonify({
            "stale": True,
            "latest_generation": session.latest_generation,
        }), 409

    payload = result.to_dict()
    payload["radius"] = session.radius.to_dict()
    return jsonify(payload)


def _body_filters(body):
    filters = body.get("filters")
    return filters if isinstance(filters, dict) else {}


def _client_ip():
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


@feed_bp.route("/api/feed")
def get_feed():
    """
    Filtered, newest-first job feed.

    Route: GET /api/feed

    Query Parameters:
        category (str, optional): Exact category
        location (str, optional): Exact location name
        salary (str, optional): Salary bucket token ("300k+", "100000-200000")
        q (str, optional): Free-text search over title, company, location

    The session's radius search is applied when it is active. Requests with
    a search term are debounced: a request overtaken by a newer one from the
    same session within the delay answers 409 without touching the store.

    Examples:
        GET /api/feed?location=Lagos&salary=300k%2B
        GET /api/feed?q=engineer
    """
    session = get_feed_session()
    typing = bool(request.args.get("q", "").strip())
    result = session.refresh(get_store(), request.args, debounce=typing)
    return _feed_response(session, result)


@feed_bp.route("/api/feed/locate", methods=["POST"])
def locate():
    """
    Center the radius search on the user.

    Body (optional): {"lon": .., "lat": .., "apply": bool, "km": number, "filters": {..}}
    Without lon/lat the position is looked up from the client IP.
    A failed lookup, or a rejected radius or filter, leaves the radius
    state unchanged.
    """
    body = json_body()
    session = get_feed_session()
    config = get_board_config()

    if "lon" in body or "lat" in body:
        provider = StaticGeolocationProvider(body.get("lon"), body.get("lat"))
    else:
        provider = IpGeolocationProvider(
            config.geolocation_url,
            ip_address=_client_ip(),
            timeout=config.geolocation_timeout,
        )

    with session.radius_change() as radius:
        if not radius.locate(provider):
            return jsonify({
                "located": False,
                "message": "Could not get your location. Using the current map center.",
                "radius": radius.to_dict(),
            })

        if not body.get("apply"):
            return jsonify({"located": True, "radius": radius.to_dict()})

        radius.apply(body.get("km"))
        result = session.refresh(get_store(), _body_filters(body))
    return _feed_response(session, result)


@feed_bp.route("/api/feed/center", methods=["POST"])
def set_center():
    """Pick the radius center manually. Body: {"lon": .., "lat": ..}"""
    body = json_body()
    session = get_feed_session()
    session.radius.set_center(body.get("lon"), body.get("lat"))
    return jsonify({"radius": session.radius.to_dict()})


@feed_bp.route("/api/feed/radius", methods=["POST"])
def apply_radius():
    """
    Confirm the radius and re-run the feed.

    Body: {"km": number, "filters": {category, location, salary, q}}
    A rejected radius or filter leaves the radius state unchanged.
    """
    body = json_body()
    session = get_feed_session()
    with session.radius_change() as radius:
        radius.apply(body.get("km"))
        result = session.refresh(get_store(), _body_filters(body))
    return _feed_response(session, result)


@feed_bp.route("/api/feed/reset", methods=["POST"])
def reset_feed():
    """Clear every filter and the radius search."""
    session = get_feed_session()
    result = session.reset(get_store())
    return _feed_response(session, result)


@feed_bp.route("/api/filters/options")
def filter_options():
    """Options for the filter bar."""
    config = get_board_config()

    buckets = []
    for token in config.salary_buckets:
        try:
            bucket = parse_filter_bucket(token)
        except ValueError:
            logger.warning(f"Skipping invalid salary bucket in config: {token!r}")
            continue
        buckets.append({
            "value": token,
            "label": format_bucket_label(bucket, config.currency_symbol),
        })

    lon, lat = config.default_center
    return jsonify({
        "categories": config.categories,
        "locations": config.locations,
        "salary_buckets": buckets,
        "default_center": {"lon": lon, "lat": lat},
        "default_radius_km": config.default_radius_km,
        "debounce_ms": config.search_debounce_ms,
    })
