"""Console and JSON rendering of enrichment results."""

from __future__ import annotations

import json
import logging
import sys
from typing import Dict, Iterable, List, Optional, TextIO

from constants import ExitCodes
from versioning.models import Coordinate, CoordinateView, DependencyRecord, Project
from versioning.ordering import is_newer

logger = logging.getLogger(__name__)


def render_record(record: DependencyRecord, view: Optional[CoordinateView], ordering=None) -> List[str]:
    """Lines describing one dependency and where its versions were found."""
    lines = [f"Checking {record.group_id}:{record.artifact_id}:{record.version}"]
    if not record.needs_lookup:
        lines.append(f"  Skipped - version is absent or a property placeholder: {record.version}")
        return lines
    lines.append(f"  Current version: {record.version}")
    if view is None or not view.found:
        lines.append("  No versions found in any repository")
        return lines
    if is_newer(view.global_latest, record.version, ordering):
        lines.append(f"  UPGRADE AVAILABLE: {view.global_latest}")
    lines.extend(_breakdown_lines(view))
    return lines


def _breakdown_lines(view: CoordinateView) -> List[str]:
    lines = []
    for row in view.breakdown:
        lines.append(f"  {row.display_name} ({row.version_count} versions):")
        lines.append(f"    Latest: {row.latest}")
        lines.append(f"    Recent: {', '.join(row.recent)}")
        label = "Path" if row.is_local else "URL"
        lines.append(f"    {label}: {row.location}")
    return lines


def render_lookup(view: CoordinateView, record: Optional[DependencyRecord] = None, ordering=None) -> List[str]:
    """Lines for a single-coordinate lookup, with or without a current version."""
    if record is not None and record.needs_lookup:
        return render_record(record, view, ordering)
    lines = [f"Looking up {view.coordinate}"]
    if not view.found:
        lines.append("  No versions found in any repository")
        return lines
    lines.append(f"  Latest version: {view.global_latest}")
    lines.append(f"  Available versions: {len(view.merged_versions)}")
    lines.extend(_breakdown_lines(view))
    return lines


def render_report(
    project: Project,
    views: Dict[Coordinate, CoordinateView],
    ordering=None,
) -> str:
    """Full console report: header, one block per dependency, conflicts."""
    lines = [f"Project: {project.artifact_id} {project.version}"]
    for record in project.all_dependencies():
        lines.extend(render_record(record, views.get(record.coordinate), ordering))
        lines.append("")
    conflicts = project.dependencies_with_conflicts()
    if conflicts:
        lines.append("Conflicts:")
        seen = set()
        for record in conflicts:
            key = (record.coordinate, record.conflict_details)
            if key in seen:
                continue
            seen.add(key)
            lines.append(f"  {record.coordinate}: {record.conflict_details}")
    return "\n".join(lines)


def print_report(text: str, stream: Optional[TextIO] = None) -> None:
    (stream or sys.stdout).write(text + "\n")


def export_json(records: Iterable[DependencyRecord], path: str) -> None:
    """Exports the enriched dependency records to a JSON file.

    Args:
        records (list): Enriched dependency records.
        path (str): File path to export the JSON.
    """
    data = [record.to_dict() for record in records]
    try:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logger.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logger.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
