"""
Configuration Loader for the map job board
Loads and validates board configuration from config.yaml
"""

import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional, Tuple
import os

from constants import (
    CANONICAL_LOCATIONS,
    CONFIG_PATH,
    CURRENCY_SYMBOL,
    DB_PATH,
    DEFAULT_CENTER,
    DEFAULT_RADIUS_KM,
    GEOLOCATION_TIMEOUT,
    JOB_CATEGORIES,
    JOB_LOCATIONS,
    SALARY_BUCKETS,
    SEARCH_DEBOUNCE_MS,
)


class Config:
    """Configuration manager for the map job board."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration from YAML file.

        Args:
            config_path: Path to config.yaml (defaults to $JOBBOARD_CONFIG or ./config.yaml)
        """
        if config_path is None:
            config_path = Path(os.getenv('JOBBOARD_CONFIG', str(CONFIG_PATH)))

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {self.config_path}\n"
                f"Copy config.example.yaml to config.yaml and adjust it."
            )

        with open(self.config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate that required configuration fields are present and sane."""
        required_sections = ['map', 'search']
        for section in required_sections:
            if section not in config:
                raise ValueError(f"Missing required config section: {section}")

        center = config['map'].get('default_center')
        if center is not None:
            if not isinstance(center, (list, tuple)) or len(center) != 2:
                raise ValueError("map.default_center must be a [lon, lat] pair")
            if not all(isinstance(v, (int, float)) for v in center):
                raise ValueError("map.default_center must contain numbers")

        radius = config['map'].get('default_radius_km')
        if radius is not None and (not isinstance(radius, (int, float)) or radius <= 0):
            raise ValueError("map.default_radius_km must be a positive number")

        for name, coords in (config['map'].get('canonical_locations') or {}).items():
            if not isinstance(coords, (list, tuple)) or len(coords) != 2:
                raise ValueError(f"Canonical location '{name}' must be a [lon, lat] pair")

    # ===== MAP =====

    @property
    def default_center(self) -> Tuple[float, float]:
        """Get the default radius-search center as (lon, lat)."""
        center = self._config['map'].get('default_center') or DEFAULT_CENTER
        return float(center[0]), float(center[1])

    @property
    def default_radius_km(self) -> float:
        """Get the default search radius in kilometers."""
        return float(self._config['map'].get('default_radius_km', DEFAULT_RADIUS_KM))

    @property
    def canonical_locations(self) -> Dict[str, Tuple[float, float]]:
        """Get the location name -> (lon, lat) lookup table, keyed lowercase."""
        table = self._config['map'].get('canonical_locations')
        if table is None:
            return dict(CANONICAL_LOCATIONS)
        return {
            name.strip().lower(): (float(coords[0]), float(coords[1]))
            for name, coords in table.items()
        }

    @property
    def geolocation_timeout(self) -> float:
        """Get the geolocation lookup timeout in seconds."""
        return float(self._config['map'].get('geolocation_timeout', GEOLOCATION_TIMEOUT))

    @property
    def geolocation_url(self) -> str:
        """Get the IP geolocation endpoint (empty disables server-side lookup)."""
        return self._config['map'].get('geolocation_url', '')

    # ===== SEARCH / FILTER OPTIONS =====

    @property
    def categories(self) -> List[str]:
        """Get the category options offered by the filter bar."""
        return self._config['search'].get('categories', list(JOB_CATEGORIES))

    @property
    def locations(self) -> List[str]:
        """Get the location options offered by the filter bar."""
        return self._config['search'].get('locations', list(JOB_LOCATIONS))

    @property
    def salary_buckets(self) -> List[str]:
        """Get the salary bucket tokens offered by the filter bar."""
        return self._config['search'].get('salary_buckets', list(SALARY_BUCKETS))

    @property
    def currency_symbol(self) -> str:
        return self._config['search'].get('currency_symbol', CURRENCY_SYMBOL)

    @property
    def search_debounce_ms(self) -> int:
        """Get the search-as-you-type debounce delay in milliseconds."""
        return int(self._config['search'].get('debounce_ms', SEARCH_DEBOUNCE_MS))

    # ===== MODERATION / STORAGE =====

    @property
    def moderation_enabled(self) -> bool:
        """New postings start unapproved when moderation is enabled."""
        return bool(self._config.get('moderation', {}).get('enabled', True))

    @property
    def database_path(self) -> Path:
        """Get the SQLite database path ($JOBBOARD_DB_PATH wins)."""
        env_path = os.getenv('JOBBOARD_DB_PATH')
        if env_path:
            return Path(env_path)
        configured = self._config.get('database', {}).get('path')
        return Path(configured) if configured else DB_PATH

    # ===== UTILITY METHODS =====

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = self._load_config()

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the raw configuration dictionary."""
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key.

        Example: config.get('map.default_radius_km')
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value


# Global config instance
_config: Optional[Config] = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """
    Get global configuration instance.
    Creates instance on first call, then returns cached instance.
    An explicit path always builds a fresh instance.
    """
    global _config
    if config_path is not None:
        _config = Config(config_path)
    elif _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload the global configuration from its file."""
    global _config
    if _config is not None:
        _config.reload()
    else:
        _config = Config()
    return _config
