"""Merge local and per-repository answers into one view per coordinate."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from constants import Constants
from registry.maven.layout import artifact_url, local_artifact_path

from .models import Coordinate, CoordinateView, RepositoryDescriptor, SourceBreakdown, VersionSet
from .ordering import latest_of, sort_versions


def aggregate(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    coordinate: Coordinate,
    local_versions: Iterable[str],
    remote_results: Mapping[str, VersionSet],
    repositories: Sequence[RepositoryDescriptor],
    local_root: Optional[str] = None,
    recent: int = Constants.RECENT_VERSIONS,
    ordering: Any = None,
) -> CoordinateView:
    """Build the merged view for one coordinate.

    Args:
        coordinate: Coordinate looked up.
        local_versions: Versions found in the local repository (any order).
        remote_results: Repository id to VersionSet, as returned by the fan-out.
        repositories: Descriptors used to label breakdown rows.
        local_root: Local repository root for breakdown paths.
        recent: How many of the most recent versions each row shows.
        ordering: Version ordering; configured default when None.

    Returns:
        CoordinateView whose ``global_latest`` is the greatest of the
        per-source latest versions and whose ``merged_versions`` is the sorted
        union of every source.
    """
    view = CoordinateView(coordinate=coordinate)

    local_sorted = sort_versions(set(local_versions), ordering)
    if local_sorted:
        view.versions_by_source[Constants.LOCAL_REPOSITORY_ID] = local_sorted
        view.latest_by_source[Constants.LOCAL_REPOSITORY_ID] = local_sorted[-1]

    for source_id in sorted(remote_results):
        result = remote_results[source_id]
        if result is None or not result.versions:
            continue
        view.versions_by_source[source_id] = list(result.versions)
        view.latest_by_source[source_id] = result.latest

    if not view.versions_by_source:
        return view

    merged = set()
    for versions in view.versions_by_source.values():
        merged.update(versions)
    view.merged_versions = sort_versions(merged, ordering)
    view.global_latest = latest_of(view.latest_by_source.values(), ordering)
    view.breakdown = _breakdown(view, repositories, local_root, recent)
    return view


def _breakdown(
    view: CoordinateView,
    repositories: Sequence[RepositoryDescriptor],
    local_root: Optional[str],
    recent: int,
) -> list:
    by_id: Dict[str, RepositoryDescriptor] = {r.id: r for r in repositories}
    group, artifact = view.coordinate.group, view.coordinate.artifact
    rows = []
    for source_id, versions in view.versions_by_source.items():
        latest = view.latest_by_source[source_id]
        shown = versions[-recent:] if recent > 0 else []
        if source_id == Constants.LOCAL_REPOSITORY_ID:
            descriptor = by_id.get(source_id)
            root = local_root or (descriptor.url if descriptor else None)
            rows.append(SourceBreakdown(
                source_id=source_id,
                display_name=descriptor.display_name if descriptor else Constants.LOCAL_REPOSITORY_NAME,
                version_count=len(versions),
                latest=latest,
                recent=shown,
                location=local_artifact_path(root, group, artifact, latest) if root else None,
                is_local=True,
            ))
            continue
        descriptor = by_id.get(source_id)
        rows.append(SourceBreakdown(
            source_id=source_id,
            display_name=descriptor.display_name if descriptor else source_id,
            version_count=len(versions),
            latest=latest,
            recent=shown,
            location=artifact_url(descriptor.url, group, artifact, latest) if descriptor else None,
        ))
    return rows
