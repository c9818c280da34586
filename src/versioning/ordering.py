"""Version ordering policies.

The default policy compares versions as plain strings, so ``"1.9"`` sorts
after ``"1.10"``. Reports depend on that behavior, so it stays the default;
callers wanting precedence-aware ordering opt into ``VersionOrdering.SEMANTIC``.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Tuple

from packaging import version as pkg_version

from constants import Constants, VersionOrdering


def _lexicographic_key(value: str) -> Tuple[Any, ...]:
    return (value,)


def _semantic_key(value: str) -> Tuple[Any, ...]:
    # Unparseable versions order before parseable ones, by string among themselves.
    try:
        return (1, pkg_version.Version(value), value)
    except pkg_version.InvalidVersion:
        return (0, value)


_KEYS = {
    VersionOrdering.LEXICOGRAPHIC: _lexicographic_key,
    VersionOrdering.SEMANTIC: _semantic_key,
}


def resolve_ordering(ordering: Optional[Any] = None) -> VersionOrdering:
    """Coerce an ordering name, enum member or None (configured default)."""
    if ordering is None:
        return Constants.ORDERING
    if isinstance(ordering, VersionOrdering):
        return ordering
    return VersionOrdering(str(ordering).strip().lower())


def sort_key(ordering: Optional[Any] = None) -> Callable[[str], Tuple[Any, ...]]:
    return _KEYS[resolve_ordering(ordering)]


def sort_versions(versions: Iterable[str], ordering: Optional[Any] = None) -> List[str]:
    """Return versions sorted ascending under the given ordering."""
    return sorted(versions, key=sort_key(ordering))


def latest_of(versions: Iterable[str], ordering: Optional[Any] = None) -> Optional[str]:
    """Return the greatest version under the ordering, or None for no input."""
    items = list(versions)
    if not items:
        return None
    return max(items, key=sort_key(ordering))


def is_newer(candidate: Optional[str], current: Optional[str], ordering: Optional[Any] = None) -> bool:
    """True when ``candidate`` orders strictly after ``current``.

    A missing current version counts as older than any candidate.
    """
    if not candidate:
        return False
    if current is None:
        return True
    key = sort_key(ordering)
    return key(candidate) > key(current)
