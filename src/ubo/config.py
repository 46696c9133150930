"""Config loader for UBO extraction."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from src.ubo.errors import UboConfigurationError

load_dotenv()


DEFAULTS = {
    "max_ubos": 4,
    "mapping_store_path": "data/shareholder_mappings.json",
    "log_level": "INFO",
    "mirakl_api_url": None,
    "request_timeout_s": 10,
}


def load_config(path: str | None = None) -> Dict[str, Any]:
    """Load UBO configuration from defaults, optional YAML file, then environment overrides."""
    cfg = dict(DEFAULTS)
    cfg_path = Path(path) if path else Path("config") / "ubo.yaml"
    if cfg_path.exists():
        data = yaml.safe_load(cfg_path.read_text()) or {}
        if isinstance(data, dict):
            cfg.update({k: v for k, v in data.items() if v is not None})
    # env overrides
    cfg["max_ubos"] = _as_int("max_ubos", os.getenv("UBO_MAX_UBOS", cfg["max_ubos"]))
    cfg["mapping_store_path"] = os.getenv("UBO_MAPPING_STORE_PATH", cfg["mapping_store_path"])
    cfg["log_level"] = os.getenv("UBO_LOG_LEVEL", cfg["log_level"])
    cfg["mirakl_api_url"] = os.getenv("MIRAKL_API_URL", cfg.get("mirakl_api_url"))
    cfg["request_timeout_s"] = _as_int("request_timeout_s", os.getenv("MIRAKL_REQUEST_TIMEOUT_S", cfg["request_timeout_s"]))
    return cfg


def _as_int(key: str, val: Any) -> int:
    try:
        return int(val)
    except (TypeError, ValueError) as exc:
        raise UboConfigurationError(f"{key} must be an integer, got {val!r}") from exc


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Raise UboConfigurationError when no UBO slot would exist."""
    max_ubos = cfg.get("max_ubos")
    if not isinstance(max_ubos, int) or max_ubos < 1:
        raise UboConfigurationError(f"UBOs must exist, number found: {max_ubos}")
    return cfg
