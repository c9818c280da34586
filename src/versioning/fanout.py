"""Concurrent fan-out of one coordinate lookup across remote repositories."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled, Timer
from constants import Constants

from .models import Coordinate, RepositoryDescriptor, VersionSet

logger = logging.getLogger(__name__)

# (descriptor, coordinate, ordering) -> Optional[VersionSet]
SourceLookup = Callable[[RepositoryDescriptor, Coordinate, Any], Optional[VersionSet]]


def _default_lookup() -> SourceLookup:
    from registry.maven.sources import fetch_versions  # pylint: disable=import-outside-toplevel
    return fetch_versions


class FanOutCoordinator:
    """Query every remote repository for one coordinate, concurrently.

    Each repository lookup runs as an independent task in a pool of
    ``min(len(remotes), max_workers)`` threads. All tasks share one deadline
    of ``timeout`` seconds; tasks still running at the deadline are
    abandoned and their results ignored. A failing or empty repository
    never fails the lookup as a whole.
    """

    def __init__(
        self,
        repositories: Sequence[RepositoryDescriptor],
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
        lookup: Optional[SourceLookup] = None,
        ordering: Any = None,
    ):
        self._remotes = tuple(r for r in repositories if not r.is_local)
        self._timeout = float(timeout if timeout is not None else Constants.FANOUT_TIMEOUT)
        self._max_workers = int(max_workers if max_workers is not None else Constants.FANOUT_MAX_WORKERS)
        self._lookup = lookup or _default_lookup()
        self._ordering = ordering

    @property
    def remotes(self) -> Sequence[RepositoryDescriptor]:
        return self._remotes

    @property
    def timeout(self) -> float:
        return self._timeout

    def _collect(self, descriptor: RepositoryDescriptor, future: Future) -> Optional[VersionSet]:
        try:
            result = future.result(timeout=0)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            if is_debug_enabled(logger):
                logger.debug("Repository lookup failed", extra=extra_context(
                    event="anomaly", component="fanout", action="collect",
                    outcome="exception", source=descriptor.id, error=repr(exc)
                ))
            return None
        if result is None or not result.versions:
            return None
        return result

    def lookup(self, coordinate: Coordinate) -> Dict[str, VersionSet]:
        """Return a mapping of repository id to VersionSet for ``coordinate``.

        Repositories that time out, raise, or report nothing are absent from
        the mapping; an empty mapping is a valid answer.
        """
        if not self._remotes:
            return {}

        results: Dict[str, VersionSet] = {}
        workers = max(1, min(len(self._remotes), self._max_workers))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="depscout-fanout")
        with Timer() as t:
            try:
                futures = {
                    executor.submit(self._lookup, descriptor, coordinate, self._ordering): descriptor
                    for descriptor in self._remotes
                }
                done, pending = wait(futures, timeout=self._timeout)
                for future in done:
                    descriptor = futures[future]
                    result = self._collect(descriptor, future)
                    if result is not None:
                        results[descriptor.id] = result
                for future in pending:
                    future.cancel()
                    if is_debug_enabled(logger):
                        logger.debug("Repository lookup abandoned", extra=extra_context(
                            event="timeout", component="fanout", action="lookup",
                            outcome="abandoned", source=futures[future].id, target=str(coordinate)
                        ))
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        if is_debug_enabled(logger):
            logger.debug("Fan-out complete", extra=extra_context(
                event="function_exit", component="fanout", action="lookup",
                target=str(coordinate), outcome="complete", responded=len(results),
                queried=len(self._remotes), duration_ms=t.duration_ms()
            ))
        return results
