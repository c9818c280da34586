"""Version sources: turn one repository's response into an ordered version list.

Three strategies share one contract, ``strategy(descriptor, coordinate,
ordering) -> Optional[VersionSet]``:

* ``metadata``: parse ``maven-metadata.xml`` under the artifact directory.
* ``search``: query a Solr search endpoint (Maven Central style).
* ``listing``: scrape version directories from an HTML index page.

A descriptor names the strategies to try, in order; the first non-empty
answer wins. Every transport or parse failure is reported as ``None``.
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Callable, Dict, List, Optional

from common.http_client import get_json, robust_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from constants import Constants
from versioning.models import Coordinate, RepositoryDescriptor, VersionSet
from versioning.ordering import sort_versions

from .layout import artifact_dir_url, metadata_url

logger = logging.getLogger(__name__)

VersionStrategy = Callable[..., Optional[VersionSet]]

_LISTING_HREF = re.compile(r'href="([0-9][^"]*/)"')


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(elem: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if elem is None:
        return None
    for item in elem:
        if _local_name(item.tag) == name:
            return item
    return None


def _text(elem: Optional[ET.Element]) -> Optional[str]:
    if elem is None or not isinstance(elem.text, str):
        return None
    value = elem.text.strip()
    return value or None


def parse_metadata_versions(document: str) -> List[str]:
    """Extract versions from a maven-metadata.xml document, in source order.

    When ``versioning/versions`` is empty, ``release`` and then ``latest`` are
    used as a last resort.

    Raises:
        ET.ParseError: The document is not well-formed XML.
    """
    root = ET.fromstring(document)
    versioning = _child(root, "versioning")
    versions: List[str] = []
    listed = _child(versioning, "versions")
    for item in (list(listed) if listed is not None else []):
        if _local_name(item.tag) == "version":
            value = _text(item)
            if value:
                versions.append(value)
    if not versions:
        for name in ("release", "latest"):
            value = _text(_child(versioning, name))
            if value and value not in versions:
                versions.append(value)
    return versions


def parse_listing_versions(listing: str) -> List[str]:
    """Extract version directory names from an HTML directory listing."""
    return [href[:-1] for href in _LISTING_HREF.findall(listing)]


def parse_search_versions(payload: Any) -> List[str]:
    """Extract versions from the first document of a Solr search response."""
    if not isinstance(payload, dict):
        return []
    response = payload.get("response")
    docs = response.get("docs") if isinstance(response, dict) else None
    if not isinstance(docs, list) or not docs or not isinstance(docs[0], dict):
        return []
    doc = docs[0]
    versions: List[str] = []
    listed = doc.get("v")
    if isinstance(listed, str):
        listed = [listed]
    if isinstance(listed, list):
        versions.extend(str(v) for v in listed if v)
    latest = doc.get("latestVersion")
    if latest and latest not in versions:
        versions.append(str(latest))
    return versions


def _result(descriptor: RepositoryDescriptor, versions: List[str], ordering: Any) -> Optional[VersionSet]:
    if not versions:
        return None
    return VersionSet(source_id=descriptor.id, versions=sort_versions(set(versions), ordering))


def fetch_metadata_versions(
    descriptor: RepositoryDescriptor, coordinate: Coordinate, ordering: Any = None
) -> Optional[VersionSet]:
    """Versions from the artifact's maven-metadata.xml."""
    url = metadata_url(descriptor.url, coordinate.group, coordinate.artifact)
    status, _, text = robust_get(url, context=descriptor.id)
    if status != 200 or not text:
        return None
    try:
        versions = parse_metadata_versions(text)
    except ET.ParseError:
        if is_debug_enabled(logger):
            logger.debug("Maven metadata parse error", extra=extra_context(
                event="anomaly", component="sources", action="fetch_metadata",
                outcome="parse_error", target=safe_url(url), source=descriptor.id
            ))
        return None
    return _result(descriptor, versions, ordering)


def fetch_search_versions(
    descriptor: RepositoryDescriptor, coordinate: Coordinate, ordering: Any = None
) -> Optional[VersionSet]:
    """Versions from a Solr search endpoint; skipped when none is configured."""
    if not descriptor.search_url:
        return None
    params = {
        "q": f"g:{coordinate.group} AND a:{coordinate.artifact}",
        "rows": Constants.SEARCH_ROWS,
        "wt": "json",
    }
    status, _, payload = get_json(
        descriptor.search_url,
        headers={"Accept": "application/json"},
        context=descriptor.id,
        params=params,
    )
    if status != 200 or payload is None:
        return None
    return _result(descriptor, parse_search_versions(payload), ordering)


def fetch_listing_versions(
    descriptor: RepositoryDescriptor, coordinate: Coordinate, ordering: Any = None
) -> Optional[VersionSet]:
    """Versions scraped from the artifact directory's HTML index."""
    url = artifact_dir_url(descriptor.url, coordinate.group, coordinate.artifact)
    status, _, text = robust_get(url, context=descriptor.id)
    if status != 200 or not text:
        return None
    return _result(descriptor, parse_listing_versions(text), ordering)


STRATEGIES: Dict[str, VersionStrategy] = {
    "metadata": fetch_metadata_versions,
    "search": fetch_search_versions,
    "listing": fetch_listing_versions,
}


def fetch_versions(
    descriptor: RepositoryDescriptor,
    coordinate: Coordinate,
    ordering: Any = None,
    strategies: Optional[Dict[str, VersionStrategy]] = None,
) -> Optional[VersionSet]:
    """Try the descriptor's strategies in order and return the first answer.

    Returns:
        VersionSet from the first strategy that produced versions, or None.
    """
    table = strategies if strategies is not None else STRATEGIES
    with Timer() as t:
        for name in descriptor.strategies:
            strategy = table.get(name)
            if strategy is None:
                logger.warning("Unknown version strategy '%s' for repository %s", name, descriptor.id)
                continue
            try:
                result = strategy(descriptor, coordinate, ordering)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Version strategy '%s' failed for repository %s: %s", name, descriptor.id, exc
                )
                continue
            if result is not None and result.versions:
                if is_debug_enabled(logger):
                    logger.debug("Versions found", extra=extra_context(
                        event="function_exit", component="sources", action="fetch_versions",
                        outcome="found", strategy=name, source=descriptor.id,
                        count=len(result.versions), duration_ms=t.duration_ms()
                    ))
                return result
    if is_debug_enabled(logger):
        logger.debug("No versions from repository", extra=extra_context(
            event="function_exit", component="sources", action="fetch_versions",
            outcome="empty", source=descriptor.id, target=str(coordinate),
            duration_ms=t.duration_ms()
        ))
    return None
