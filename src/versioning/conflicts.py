"""Conflict detection over a project's declared dependencies.

Two modes are provided:

* ``detect_conflicts`` groups the declared set by coordinate and flags
  every member of a group that declares more than one distinct version.
* ``detect_tree_conflicts`` reads a rendered ``mvn dependency:tree`` report
  and flags dependencies whose version was managed away from another one.

Neither mode performs I/O; both are deterministic for a given input.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Tuple

from constants import Constants

from .models import Coordinate, DependencyRecord
from .ordering import sort_versions

logger = logging.getLogger(__name__)

_TREE_BRANCH = "- "


def group_by_coordinate(records: Iterable[DependencyRecord]) -> Dict[Coordinate, List[DependencyRecord]]:
    """Group records by (group, artifact), preserving first-seen order."""
    groups: Dict[Coordinate, List[DependencyRecord]] = OrderedDict()
    for record in records:
        groups.setdefault(record.coordinate, []).append(record)
    return groups


def detect_conflicts(records: Iterable[DependencyRecord]) -> List[DependencyRecord]:
    """Flag records whose coordinate is declared with differing versions.

    Args:
        records: Every declared dependency of the project, regular and managed.

    Returns:
        The records that were flagged, in input order.
    """
    flagged: List[DependencyRecord] = []
    for coordinate, members in group_by_coordinate(records).items():
        if len(members) < 2:
            continue
        versions = {m.version for m in members if m.version is not None}
        if len(versions) < 2:
            continue
        details = "Multiple versions found: " + ", ".join(sort_versions(versions))
        logger.info("Version conflict for %s: %s", coordinate, details)
        for member in members:
            member.has_conflicts = True
            member.conflict_details = details
            flagged.append(member)
    return flagged


def parse_tree_line(line: str) -> Optional[Tuple[str, str, str, str]]:
    """Extract (group, artifact, managed_from, resolved) from one tree line.

    Only lines carrying the ``(version managed from X)`` marker are parsed;
    others return None.

    Raises:
        ValueError: The line carries the marker but cannot be sliced into a
            coordinate.
    """
    marker_at = line.find(Constants.TREE_MANAGED_MARKER)
    if marker_at == -1:
        return None

    start = line.find(_TREE_BRANCH)
    if start == -1 or start > marker_at:
        raise ValueError("missing tree branch marker")
    token = line[start + len(_TREE_BRANCH):marker_at].strip()
    parts = token.split(":")
    if len(parts) < 4 or not parts[0] or not parts[1]:
        raise ValueError(f"unexpected coordinate '{token}'")
    # g:a:type:version[:scope] or g:a:type:classifier:version:scope
    resolved = parts[4] if len(parts) >= 6 else parts[3]

    from_start = marker_at + len(Constants.TREE_MANAGED_MARKER)
    from_end = line.find(")", from_start)
    if from_end == -1:
        raise ValueError("unterminated managed-from marker")
    managed_from = line[from_start:from_end].split(";", 1)[0].strip()
    if not managed_from or not resolved:
        raise ValueError("empty version")
    return parts[0], parts[1], managed_from, resolved


def detect_tree_conflicts(records: Iterable[DependencyRecord], tree_text: str) -> List[DependencyRecord]:
    """Annotate every declaration named by a managed line of a dependency-tree report.

    Malformed lines are logged and skipped; this function never raises on
    report content.

    Returns:
        The records that were flagged, in report order.
    """
    by_coordinate = group_by_coordinate(records)
    flagged: List[DependencyRecord] = []
    for line in (tree_text or "").splitlines():
        try:
            parsed = parse_tree_line(line)
        except ValueError as exc:
            logger.warning("Skipping unparseable dependency tree line (%s): %s", exc, line.strip())
            continue
        if parsed is None:
            continue
        group, artifact, managed_from, resolved = parsed
        details = f"Version conflict: {managed_from} -> {resolved}"
        for record in by_coordinate.get(Coordinate(group, artifact), []):
            record.has_conflicts = True
            record.conflict_details = details
            flagged.append(record)
    return flagged
