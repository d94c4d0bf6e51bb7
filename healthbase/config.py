import os
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"

DEFAULT_REVIEW_HOST = "127.0.0.1"
DEFAULT_REVIEW_PORT = 5050


def _expand(value):
    """Recursively expand ~ and env vars in string values."""
    if isinstance(value, str):
        return os.path.expandvars(os.path.expanduser(value))
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def load_config(path=None):
    """Load YAML config, expanding ~ and $ENV_VARS in all string values.

    HEALTHBASE_CONFIG overrides the default location.
    """
    if path is None:
        path = os.environ.get("HEALTHBASE_CONFIG") or DEFAULT_CONFIG_PATH
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return _expand(raw)


def get_workouts_export_path(config) -> Path:
    """Resolve the raw workout export file from config."""
    try:
        return Path(config["paths"]["workouts_export"])
    except (KeyError, TypeError):
        raise KeyError("paths.workouts_export is not set in config") from None


def get_health_export_path(config) -> Path:
    """Resolve the health sample export file from config."""
    try:
        return Path(config["paths"]["health_export"])
    except (KeyError, TypeError):
        raise KeyError("paths.health_export is not set in config") from None


def get_review_address(config) -> tuple[str, int]:
    review = (config or {}).get("review") or {}
    return review.get("host", DEFAULT_REVIEW_HOST), int(review.get("port", DEFAULT_REVIEW_PORT))
