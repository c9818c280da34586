"""Local repository scanner: versions already materialized on disk."""
from __future__ import annotations

import logging
import os
from typing import List

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled

from .layout import local_artifact_dir

logger = logging.getLogger(__name__)


def _has_binary(version_dir: str, artifact: str, version: str, extension: str) -> bool:
    """Return True when the version directory holds an artifact binary.

    The exact ``artifact-version.ext`` file is preferred; any ``*.ext`` file
    (classified variants) is accepted as a fallback.
    """
    if os.path.isfile(os.path.join(version_dir, f"{artifact}-{version}.{extension}")):
        return True
    suffix = f".{extension}"
    try:
        return any(
            entry.is_file() and entry.name.endswith(suffix)
            for entry in os.scandir(version_dir)
        )
    except OSError:
        return False


def scan_local_versions(
    root: str,
    group: str,
    artifact: str,
    extension: str = Constants.DEFAULT_EXTENSION,
) -> List[str]:
    """List versions of ``group:artifact`` present in a local repository.

    Args:
        root: Local repository root (e.g. ``~/.m2/repository``).
        group: Maven group ID; dots map to directory separators.
        artifact: Maven artifact ID.
        extension: Binary extension that marks a complete download.

    Returns:
        Version directory names holding at least one binary, in directory
        order. Empty when the root or artifact directory does not exist.
    """
    if not root:
        return []
    base = local_artifact_dir(root, group, artifact)
    if not os.path.isdir(base):
        return []

    versions: List[str] = []
    try:
        entries = list(os.scandir(base))
    except OSError:
        return []
    for entry in entries:
        if not entry.is_dir():
            continue
        if _has_binary(entry.path, artifact, entry.name, extension):
            versions.append(entry.name)
        elif is_debug_enabled(logger):
            logger.debug("Skipping version directory without binary", extra=extra_context(
                event="decision", component="local", action="scan_local_versions",
                target=entry.path, outcome="no_binary"
            ))
    return versions
