"""Repository registry: an explicit, validated set of version sources."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from constants import Constants
from versioning.models import RepositoryDescriptor

from .layout import normalize_base_url

logger = logging.getLogger(__name__)


class RepositoryConfigError(ValueError):
    """Raised when a repository list violates the registry invariants."""


def validate_repositories(repositories: Sequence[RepositoryDescriptor]) -> None:
    """Check id uniqueness and the single reserved local descriptor.

    Raises:
        RepositoryConfigError: On duplicate ids, more than one local
            descriptor, or a local/remote id mismatch with ``"local"``.
    """
    seen = set()
    local_count = 0
    for repo in repositories:
        if not repo.id:
            raise RepositoryConfigError("Repository id must not be empty")
        if repo.id in seen:
            raise RepositoryConfigError(f"Duplicate repository id: {repo.id}")
        seen.add(repo.id)
        if repo.is_local:
            local_count += 1
            if repo.id != Constants.LOCAL_REPOSITORY_ID:
                raise RepositoryConfigError(
                    f"Local repository must use id '{Constants.LOCAL_REPOSITORY_ID}', got '{repo.id}'"
                )
        elif repo.id == Constants.LOCAL_REPOSITORY_ID:
            raise RepositoryConfigError(
                f"Repository id '{Constants.LOCAL_REPOSITORY_ID}' is reserved for the local repository"
            )
    if local_count > 1:
        raise RepositoryConfigError("Only one local repository may be configured")


class RepositoryRegistry:
    """Ordered, immutable collection of repository descriptors."""

    def __init__(self, repositories: Iterable[RepositoryDescriptor] = ()):
        items = list(repositories)
        validate_repositories(items)
        self._repositories = tuple(items)

    def __iter__(self) -> Iterator[RepositoryDescriptor]:
        return iter(self._repositories)

    def __len__(self) -> int:
        return len(self._repositories)

    @property
    def repositories(self) -> Sequence[RepositoryDescriptor]:
        return self._repositories

    def remotes(self) -> List[RepositoryDescriptor]:
        return [r for r in self._repositories if not r.is_local]

    def local(self) -> Optional[RepositoryDescriptor]:
        for repo in self._repositories:
            if repo.is_local:
                return repo
        return None

    def get(self, repo_id: str) -> Optional[RepositoryDescriptor]:
        for repo in self._repositories:
            if repo.id == repo_id:
                return repo
        return None

    def merged(self, extra: Iterable[RepositoryDescriptor]) -> "RepositoryRegistry":
        """Return a new registry with ``extra`` appended.

        Entries whose id or normalized URL is already present are dropped, as
        are any second local descriptor and remotes with a non-default layout.
        """
        items = list(self._repositories)
        ids = {r.id for r in items}
        urls = {normalize_base_url(r.url) for r in items if not r.is_local}
        has_local = any(r.is_local for r in items)
        for repo in extra:
            if repo.is_local:
                if has_local:
                    continue
                has_local = True
            elif repo.id == Constants.LOCAL_REPOSITORY_ID:
                logger.warning("Skipping remote repository using reserved id '%s' (%s)", repo.id, repo.url)
                continue
            elif repo.layout and repo.layout != Constants.DEFAULT_LAYOUT:
                logger.warning("Skipping repository %s with unsupported layout '%s'", repo.id, repo.layout)
                continue
            elif repo.id in ids or normalize_base_url(repo.url) in urls:
                logger.debug("Skipping duplicate repository %s (%s)", repo.id, repo.url)
                continue
            items.append(repo)
            ids.add(repo.id)
            if not repo.is_local:
                urls.add(normalize_base_url(repo.url))
        return RepositoryRegistry(items)


def local_descriptor(root: str) -> RepositoryDescriptor:
    return RepositoryDescriptor(
        id=Constants.LOCAL_REPOSITORY_ID,
        name=Constants.LOCAL_REPOSITORY_NAME,
        url=root,
        is_local=True,
        strategies=(),
    )


def default_repositories() -> List[RepositoryDescriptor]:
    """The built-in remote repositories."""
    return [
        RepositoryDescriptor(id=repo_id, name=name, url=url, search_url=search_url)
        for repo_id, name, url, search_url in Constants.DEFAULT_REPOSITORIES
    ]


def build_registry(
    local_root: Optional[str] = None,
    extra: Iterable[RepositoryDescriptor] = (),
    include_defaults: bool = True,
) -> RepositoryRegistry:
    """Defaults, then ``extra``, then the local repository, de-duplicated."""
    registry = RepositoryRegistry(default_repositories() if include_defaults else [])
    registry = registry.merged(extra)
    if local_root:
        registry = registry.merged([local_descriptor(local_root)])
    return registry
