import os
import copy
import yaml
from pathlib import Path
from dotenv import load_dotenv

from screening.errors import ConfigError
from screening.risk_policy import DEFAULT_THRESHOLDS, DEFAULT_POINTS

load_dotenv()

# API endpoints
RUGCHECK_API_URL = os.getenv("RUGCHECK_API_URL", "https://api.rugcheck.xyz")
RUGCHECK_API_KEY = os.getenv("RUGCHECK_API_KEY", "").strip()
GMGN_API_URL = os.getenv("GMGN_API_URL", "https://gmgn.ai")
GMGN_USER_AGENT = os.getenv("GMGN_USER_AGENT", "Mozilla/5.0 (token-filtering)")

# HTTP behaviour
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
HTTP_MAX_RETRIES = int(os.getenv("HTTP_MAX_RETRIES", "3"))
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "1800"))  # 30 minutes

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Rug-risk policy thresholds and points, overridable from screening.yaml
RISK_THRESHOLDS = dict(DEFAULT_THRESHOLDS)
RISK_POINTS = dict(DEFAULT_POINTS)

DEFAULT_SCREENING_CONFIG = {
    "rugcheck": {
        "base_url": RUGCHECK_API_URL,
        "api_key": RUGCHECK_API_KEY,
        "timeout_seconds": HTTP_TIMEOUT_SECONDS,
        "max_retries": HTTP_MAX_RETRIES,
        "min_request_interval": 0.2,
        "cache": {"ttl_seconds": CACHE_TTL_SECONDS, "max_size": 1000},
        "circuit": {"failure_threshold": 0.6, "timeout": 300},
    },
    "gmgn": {
        "enabled": True,
        "base_url": GMGN_API_URL,
        "user_agent": GMGN_USER_AGENT,
        "timeout_seconds": HTTP_TIMEOUT_SECONDS,
        "max_retries": HTTP_MAX_RETRIES,
        "min_request_interval": 0.5,
        "cache": {"ttl_seconds": CACHE_TTL_SECONDS, "max_size": 1000},
        "circuit": {"failure_threshold": 0.6, "timeout": 300},
    },
    "thresholds": RISK_THRESHOLDS,
    "points": RISK_POINTS,
    "concurrency": 4,
}

SCREENING_CONFIG_PATH = Path(
    os.getenv("SCREENING_CONFIG_PATH", str(Path(__file__).parent / "screening.yaml"))
)


def _deep_merge(base: dict, override: dict) -> dict:
    """Return base updated recursively with override (neither is mutated)."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_screening_config(path=None) -> dict:
    """Load screening.yaml and merge it over the defaults above."""
    config_path = Path(path) if path else SCREENING_CONFIG_PATH
    if not config_path.exists():
        if path:
            raise ConfigError(f"Config file not found: {config_path}")
        return copy.deepcopy(DEFAULT_SCREENING_CONFIG)

    with open(config_path, 'r') as f:
        try:
            overrides = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigError(f"{config_path} must contain a mapping, got {type(overrides).__name__}")

    return _deep_merge(DEFAULT_SCREENING_CONFIG, overrides)
