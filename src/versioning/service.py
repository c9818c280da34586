"""Dependency enrichment: per-coordinate lookups plus project-wide conflict checks."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled, Timer
from constants import Constants
from registry.maven.layout import artifact_url, local_artifact_path
from registry.maven.local import scan_local_versions
from registry.maven.repositories import RepositoryRegistry

from .aggregator import aggregate
from .conflicts import detect_conflicts, detect_tree_conflicts
from .fanout import FanOutCoordinator, SourceLookup
from .models import Coordinate, CoordinateView, DependencyRecord, Project, RepositoryDescriptor

logger = logging.getLogger(__name__)

LocalScanner = Callable[[str, str, str], List[str]]


class VersionLookupService:  # pylint: disable=too-many-instance-attributes
    """Answer "which versions exist and which is newest" for declared dependencies.

    The repository set is fixed at construction. Each coordinate lookup scans
    the local repository while the remote fan-out runs, then merges both into
    a CoordinateView. Records are annotated on the calling thread once every
    concurrent task for their coordinate has finished.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        repositories: Iterable[RepositoryDescriptor],
        local_root: Optional[str] = None,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
        ordering: Any = None,
        lookup: Optional[SourceLookup] = None,
        local_scanner: Optional[LocalScanner] = None,
        recent: int = Constants.RECENT_VERSIONS,
    ):
        self._registry = repositories if isinstance(repositories, RepositoryRegistry) else RepositoryRegistry(repositories)
        local = self._registry.local()
        self._local_root = local_root or (local.url if local else None)
        self._ordering = ordering
        self._recent = recent
        self._scan = local_scanner or scan_local_versions
        self._fanout = FanOutCoordinator(
            self._registry.remotes(),
            timeout=timeout,
            max_workers=max_workers,
            lookup=lookup,
            ordering=ordering,
        )

    @property
    def registry(self) -> RepositoryRegistry:
        return self._registry

    @property
    def local_root(self) -> Optional[str]:
        return self._local_root

    def _scan_local(self, coordinate: Coordinate) -> List[str]:
        if not self._local_root:
            return []
        try:
            return list(self._scan(self._local_root, coordinate.group, coordinate.artifact))
        except OSError as e:
            logger.warning("Local repository scan failed for %s: %s", coordinate, e)
            return []

    def lookup(self, coordinate: Coordinate) -> CoordinateView:
        """Query the local repository and every remote for one coordinate."""
        with Timer() as t:
            with ThreadPoolExecutor(max_workers=1, thread_name_prefix="depscout-local") as pool:
                local_future = pool.submit(self._scan_local, coordinate)
                remote_results = self._fanout.lookup(coordinate)
                local_versions = local_future.result()
            view = aggregate(
                coordinate,
                local_versions,
                remote_results,
                self._registry.repositories,
                local_root=self._local_root,
                recent=self._recent,
                ordering=self._ordering,
            )
        if is_debug_enabled(logger):
            logger.debug("Coordinate lookup complete", extra=extra_context(
                event="function_exit", component="service", action="lookup",
                target=str(coordinate), outcome="found" if view.found else "not_found",
                sources=len(view.versions_by_source), duration_ms=t.duration_ms()
            ))
        return view

    def _annotate(self, record: DependencyRecord, view: CoordinateView) -> None:
        record.available_versions = list(view.merged_versions)
        record.latest_version = view.global_latest
        if Constants.LOCAL_REPOSITORY_ID in view.versions_by_source and self._local_root:
            record.local_path = local_artifact_path(
                self._local_root, record.group_id, record.artifact_id, str(record.version)
            )
        for source_id, latest in view.latest_by_source.items():
            if source_id == Constants.LOCAL_REPOSITORY_ID or latest != view.global_latest:
                continue
            descriptor = self._registry.get(source_id)
            if descriptor is not None:
                record.repository_url = artifact_url(
                    descriptor.url, record.group_id, record.artifact_id, latest
                )
                break

    def enrich(self, record: DependencyRecord, view: Optional[CoordinateView] = None) -> Optional[CoordinateView]:
        """Look up and annotate one record.

        Records without a declared version, or with a property placeholder,
        are returned untouched without any lookup.

        Returns:
            The CoordinateView used, or None when the record was skipped.
        """
        if not record.needs_lookup:
            logger.info(
                "Skipping %s:%s - version is absent or a property placeholder: %s",
                record.group_id, record.artifact_id, record.version,
            )
            return None
        if view is None:
            view = self.lookup(record.coordinate)
        if not view.found:
            logger.warning("No versions found in any repository for %s", record.coordinate)
            return view
        self._annotate(record, view)
        return view

    def enrich_all(self, records: Sequence[DependencyRecord]) -> Dict[Coordinate, CoordinateView]:
        """Enrich every record, then flag declared-version conflicts.

        A coordinate declared more than once is looked up once per call.
        """
        views: Dict[Coordinate, CoordinateView] = {}
        for record in records:
            view = self.enrich(record, views.get(record.coordinate))
            if view is not None:
                views[record.coordinate] = view
        detect_conflicts(records)
        return views

    def analyze_project(
        self, project: Project, dependency_tree: Optional[str] = None
    ) -> Dict[Coordinate, CoordinateView]:
        """Enrich regular and managed dependencies of a project.

        When a rendered dependency tree is supplied, managed-version
        conflicts from it are applied after the declared-version pass.
        """
        records = project.all_dependencies()
        views = self.enrich_all(records)
        if dependency_tree:
            detect_tree_conflicts(records, dependency_tree)
        return views
