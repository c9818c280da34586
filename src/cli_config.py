"""YAML/JSON configuration loading and runtime overrides.

Configuration keys (all optional):

    local_repository: /path/to/.m2/repository
    timeout: 15
    max_workers: 10
    request_timeout: 10
    http_retries: 1
    ordering: lexicographic | semantic
    include_defaults: true
    repositories:
      - id: internal
        name: Internal Nexus
        url: https://nexus.example.com/repository/maven-public/
        strategies: [metadata, listing]
        search_url: null
        layout: default
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants
from versioning.models import RepositoryDescriptor
from versioning.ordering import resolve_ordering

logger = logging.getLogger(__name__)

# (config key, Constants attribute, coercion)
_TUNABLES = (
    ("timeout", "FANOUT_TIMEOUT", float),
    ("max_workers", "FANOUT_MAX_WORKERS", int),
    ("request_timeout", "REQUEST_TIMEOUT", float),
    ("http_retries", "HTTP_RETRY_MAX", int),
    ("ordering", "ORDERING", resolve_ordering),
)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to a .yml/.yaml/.json file; None for no config.

    Returns:
        Configuration dict; empty when the path is unset, missing or invalid.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    return data if isinstance(data, dict) else {}


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply tunables from a loaded config onto Constants.

    Invalid values are logged and ignored so a bad config never breaks a run.
    """
    if not cfg:
        return
    for key, attr, coerce in _TUNABLES:
        raw = cfg.get(key)
        if raw is None or raw == "":
            continue
        try:
            value = coerce(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid configuration value for '%s': %s", key, e)
            continue
        setattr(Constants, attr, value)


def repositories_from_config(cfg: Dict[str, Any]) -> List[RepositoryDescriptor]:
    """Build remote RepositoryDescriptors from the ``repositories`` list."""
    entries = cfg.get("repositories") or []
    if not isinstance(entries, list):
        logger.warning("Ignoring 'repositories': expected a list")
        return []
    found: List[RepositoryDescriptor] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("id") or not entry.get("url"):
            logger.warning("Ignoring repository entry without id/url: %s", entry)
            continue
        strategies = entry.get("strategies") or Constants.DEFAULT_STRATEGIES
        found.append(RepositoryDescriptor(
            id=str(entry["id"]),
            name=str(entry.get("name") or entry["id"]),
            url=str(entry["url"]),
            strategies=tuple(str(s) for s in strategies),
            search_url=entry.get("search_url"),
            layout=entry.get("layout"),
        ))
    return found
