import os
import tomllib
from pathlib import Path
from typing import Any

_DEFAULT_CONFIG_PATH = Path("config.toml")
_DEFAULT_ENV_PATH = Path("secrets")

_DEFAULT_API_URL = "http://localhost:3000"
_DEFAULT_TIMEOUT = 15


def load(path: Path = _DEFAULT_CONFIG_PATH, env_path: Path = _DEFAULT_ENV_PATH) -> dict[str, Any]:
    """Load config from TOML (built-in defaults when the file is missing), then overlay secrets."""
    cfg: dict[str, Any] = {}
    if path.exists():
        with open(path, "rb") as f:
            cfg = tomllib.load(f)
    _load_env(env_path, cfg)
    return cfg


def _load_env(env_path: Path, cfg: dict) -> None:
    """
    Parse a .env-style file and inject values into the config dict.

    Supported variable names:
      DUBAI_EVENTS_API_URL  -> cfg["api"]["base_url"]
      DUBAI_EVENTS_API_KEY  -> cfg["secrets"]["api_key"]

    Shell environment variables take precedence over .env values.
    """
    _apply_env_vars(cfg)

    if not env_path.exists():
        return

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key not in os.environ:
                os.environ[key] = value

    _apply_env_vars(cfg)


def _apply_env_vars(cfg: dict) -> None:
    if v := os.environ.get("DUBAI_EVENTS_API_URL"):
        cfg.setdefault("api", {})["base_url"] = v
    if v := os.environ.get("DUBAI_EVENTS_API_KEY"):
        cfg.setdefault("secrets", {})["api_key"] = v


def get_api(cfg: dict) -> dict:
    api = cfg.get("api", {})
    return {
        "base_url": api.get("base_url", _DEFAULT_API_URL).rstrip("/"),
        "timeout": api.get("timeout", _DEFAULT_TIMEOUT),
    }


def get_api_key(cfg: dict) -> str | None:
    return cfg.get("secrets", {}).get("api_key")


def get_filters(cfg: dict) -> dict:
    filters = cfg.get("filters", {})
    return {
        "default_area": filters.get("default_area", "All Dubai"),
        "date_lookback_days": filters.get("date_lookback_days", 3),
    }
