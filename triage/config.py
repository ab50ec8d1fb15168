"""YAML configuration loading with ${ENV_VAR} substitution."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_DB_PATH = "data/feedback.db"

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")


def _resolve(value: Any) -> Any:
    """Resolve ${ENV_VAR} references inside strings, recursively."""
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _resolve(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve(v) for v in value]
    return value


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load and return the YAML configuration. A missing file means defaults."""
    config_path = Path(path)
    if not config_path.exists():
        logger.info("No config file at %s; using defaults", path)
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return _resolve(config)
