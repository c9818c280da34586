"""Maven repository layout: URL and path construction for coordinates."""
from __future__ import annotations

import os

from constants import Constants


def normalize_base_url(base: str) -> str:
    """Return ``base`` ending in exactly one ``/``."""
    return base.rstrip("/") + "/"


def group_path(group: str) -> str:
    return group.replace(".", "/")


def artifact_dir_url(base: str, group: str, artifact: str) -> str:
    """URL of the artifact directory, trailing separator included."""
    return normalize_base_url(base) + group_path(group) + "/" + artifact + "/"


def metadata_url(base: str, group: str, artifact: str) -> str:
    """URL of the artifact's maven-metadata.xml."""
    return normalize_base_url(base) + group_path(group) + "/" + artifact + "/" + Constants.METADATA_FILE


def artifact_url(base: str, group: str, artifact: str, version: str) -> str:
    """URL of one version directory of an artifact."""
    return normalize_base_url(base) + group_path(group) + "/" + artifact + "/" + version


def local_artifact_dir(root: str, group: str, artifact: str) -> str:
    return os.path.join(root, *group.split("."), artifact)


def local_artifact_path(root: str, group: str, artifact: str, version: str) -> str:
    """Filesystem path of one version directory inside a local repository."""
    return os.path.join(local_artifact_dir(root, group, artifact), version)
