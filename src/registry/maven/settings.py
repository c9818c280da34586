"""Maven settings.xml discovery: local repository root and profile repositories."""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import List, Optional

from constants import Constants
from versioning.models import RepositoryDescriptor

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _iter_named(elem: ET.Element, name: str):
    for item in elem.iter():
        if _local_name(item.tag) == name:
            yield item


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for item in elem:
        if _local_name(item.tag) == name and isinstance(item.text, str):
            value = item.text.strip()
            return value or None
    return None


def settings_paths(home: Optional[str] = None, m2_home: Optional[str] = None) -> List[str]:
    """Candidate settings.xml files: user settings first, then global."""
    home = home if home is not None else os.path.expanduser("~")
    m2_home = m2_home if m2_home is not None else os.environ.get(Constants.ENV_M2_HOME)
    paths = [os.path.join(home, ".m2", Constants.SETTINGS_XML_FILE)]
    if m2_home:
        paths.append(os.path.join(m2_home, "conf", Constants.SETTINGS_XML_FILE))
    return paths


def _parse(path: str) -> Optional[ET.Element]:
    if not os.path.isfile(path):
        return None
    try:
        return ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        logger.warning("Error reading Maven settings %s: %s", path, e)
        return None


def read_local_repository(path: str) -> Optional[str]:
    """Return ``<localRepository>`` from one settings.xml, if set."""
    root = _parse(path)
    if root is None:
        return None
    return _child_text(root, "localRepository")


def read_profile_repositories(path: str) -> List[RepositoryDescriptor]:
    """Return repositories declared under ``<profiles>`` in one settings.xml.

    Entries without an id or url are ignored; a missing name falls back to
    the id.
    """
    root = _parse(path)
    if root is None:
        return []
    found: List[RepositoryDescriptor] = []
    for profiles in _iter_named(root, "profiles"):
        for repo in _iter_named(profiles, "repository"):
            repo_id = _child_text(repo, "id")
            url = _child_text(repo, "url")
            if not repo_id or not url:
                continue
            found.append(RepositoryDescriptor(
                id=repo_id,
                name=_child_text(repo, "name") or repo_id,
                url=url,
                layout=_child_text(repo, "layout"),
            ))
    return found


def resolve_local_repository(home: Optional[str] = None, m2_home: Optional[str] = None) -> str:
    """Local repository root from settings, else ``~/.m2/repository``."""
    for path in settings_paths(home, m2_home):
        value = read_local_repository(path)
        if value:
            return value
    home = home if home is not None else os.path.expanduser("~")
    return os.path.join(home, ".m2", "repository")


def discover_repositories(home: Optional[str] = None, m2_home: Optional[str] = None) -> List[RepositoryDescriptor]:
    """Profile repositories from user then global settings, in that order."""
    found: List[RepositoryDescriptor] = []
    for path in settings_paths(home, m2_home):
        found.extend(read_profile_repositories(path))
    return found
