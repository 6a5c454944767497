"""
Constants - Shared configuration and constants

This module contains shared constants used across the map job board.
Coordinates are stored as (longitude, latitude) to match the map SDK.
"""

from pathlib import Path

# Application directories
APP_DIR = Path(__file__).parent
DB_PATH = APP_DIR / "jobs.db"
CONFIG_PATH = APP_DIR / "config.yaml"
FRONTEND_DIR = APP_DIR / "public"

# Mean Earth radius used by the haversine formula
EARTH_RADIUS_KM = 6371.0

# Canonical city used when nothing else is selected (Central Lagos)
DEFAULT_CITY = 'lagos'
DEFAULT_CENTER = (3.3792, 6.5244)
DEFAULT_RADIUS_KM = 50

# Name -> (lon, lat) for jobs without explicit coordinates
CANONICAL_LOCATIONS = {
    'lagos': (3.3792, 6.5244),
    'abuja': (7.4913, 9.0722),
    'hybrid': (3.3792, 6.5244),  # hybrid roles are anchored to Lagos
}

JOB_CATEGORIES = ['IT', 'Finance', 'Marketing', 'HR', 'Other']
JOB_LOCATIONS = ['Lagos', 'Abuja', 'Remote', 'Hybrid']
SALARY_BUCKETS = ['100k+', '300k+', '500k+', '1M+']
CURRENCY_SYMBOL = '₦'

# Search-as-you-type debounce and geolocation lookup timeout
SEARCH_DEBOUNCE_MS = 300
GEOLOCATION_TIMEOUT = 5.0

# Feed sessions kept in memory before the least recently used is dropped
MAX_FEED_SESSIONS = 1000

# Fields the store accepts as equality filters
PUSHABLE_FIELDS = ('category', 'location')

# Shown when a posting leaves the salary blank
DEFAULT_SALARY = 'Competitive'
