"""pom.xml loading into a Project of DependencyRecords."""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import List, Optional

from constants import Constants
from versioning.models import DependencyRecord, Project, RepositoryDescriptor

logger = logging.getLogger(__name__)

NS = "{http://maven.apache.org/POM/4.0.0}"


class PomLoadError(Exception):
    """Raised when a pom.xml cannot be read or parsed."""


def _q(name: str, namespaced: bool) -> str:
    return f"{NS}{name}" if namespaced else name


def _text(elem: Optional[ET.Element], name: str, namespaced: bool) -> Optional[str]:
    if elem is None:
        return None
    node = elem.find(_q(name, namespaced))
    if node is None or node.text is None:
        return None
    value = node.text.strip()
    return value or None


def _dependencies(container: Optional[ET.Element], namespaced: bool, label: str) -> List[DependencyRecord]:
    records: List[DependencyRecord] = []
    if container is None:
        return records
    for dependency in container.findall(_q("dependency", namespaced)):
        group = _text(dependency, "groupId", namespaced)
        artifact = _text(dependency, "artifactId", namespaced)
        if not group or not artifact:
            logger.warning(
                "Skipping %s dependency without groupId/artifactId (groupId=%s, artifactId=%s)",
                label, group, artifact,
            )
            continue
        records.append(DependencyRecord(
            group_id=group,
            artifact_id=artifact,
            version=_text(dependency, "version", namespaced),
            scope=_text(dependency, "scope", namespaced),
            type=_text(dependency, "type", namespaced),
            classifier=_text(dependency, "classifier", namespaced),
            optional=(_text(dependency, "optional", namespaced) or "").lower() == "true",
        ))
    return records


def load_project(path: str) -> Project:
    """Parse a pom.xml (or a directory holding one) into a Project.

    Property placeholders are kept verbatim; expansion is left to callers.

    Raises:
        PomLoadError: The file is missing or not well-formed XML.
    """
    if os.path.isdir(path):
        path = os.path.join(path, Constants.POM_XML_FILE)
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise PomLoadError(f"Couldn't load {path}: {e}") from e

    namespaced = root.tag.startswith(NS)
    project = Project(
        group_id=_text(root, "groupId", namespaced),
        artifact_id=_text(root, "artifactId", namespaced),
        version=_text(root, "version", namespaced),
        packaging=_text(root, "packaging", namespaced),
        name=_text(root, "name", namespaced),
        local_path=os.path.abspath(path),
    )

    parent = root.find(_q("parent", namespaced))
    if parent is not None:
        project.parent_coordinates = ":".join(
            str(_text(parent, field, namespaced)) for field in ("groupId", "artifactId", "version")
        )

    properties = root.find(_q("properties", namespaced))
    if properties is not None:
        for prop in properties:
            key = prop.tag[len(NS):] if namespaced and prop.tag.startswith(NS) else prop.tag
            project.properties[key] = (prop.text or "").strip()

    repositories = root.find(_q("repositories", namespaced))
    if repositories is not None:
        for repo in repositories.findall(_q("repository", namespaced)):
            repo_id = _text(repo, "id", namespaced)
            url = _text(repo, "url", namespaced)
            if not repo_id or not url:
                continue
            project.repositories.append(RepositoryDescriptor(
                id=repo_id,
                name=_text(repo, "name", namespaced) or repo_id,
                url=url,
                layout=_text(repo, "layout", namespaced),
            ))

    project.dependencies = _dependencies(root.find(_q("dependencies", namespaced)), namespaced, "regular")
    management = root.find(_q("dependencyManagement", namespaced))
    if management is not None:
        project.managed_dependencies = _dependencies(
            management.find(_q("dependencies", namespaced)), namespaced, "managed"
        )
    return project
