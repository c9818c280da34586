"""Data models for multi-source version lookups."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from constants import Constants


@dataclass(frozen=True)
class Coordinate:
    """Identity of an artifact independent of its version."""
    group: str
    artifact: str

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """A configured source of versions: a remote repository or the local cache."""
    id: str
    name: str
    url: str  # base URL for remotes, filesystem root for the local cache
    is_local: bool = False
    layout: Optional[str] = None  # None is treated as "default"
    strategies: Tuple[str, ...] = Constants.DEFAULT_STRATEGIES
    search_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class VersionSet:
    """Versions one source reports for one coordinate, already ordered."""
    source_id: str
    versions: List[str]

    @property
    def latest(self) -> Optional[str]:
        return self.versions[-1] if self.versions else None


@dataclass
class SourceBreakdown:
    """Renderable per-source summary of a lookup."""
    source_id: str
    display_name: str
    version_count: int
    latest: Optional[str]
    recent: List[str]
    location: Optional[str]  # artifact URL for remotes, filesystem path for local
    is_local: bool = False


@dataclass
class CoordinateView:
    """Merged view of every source's answer for one coordinate."""
    coordinate: Coordinate
    versions_by_source: Dict[str, List[str]] = field(default_factory=dict)
    latest_by_source: Dict[str, str] = field(default_factory=dict)
    merged_versions: List[str] = field(default_factory=list)
    global_latest: Optional[str] = None
    breakdown: List[SourceBreakdown] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.versions_by_source)


def is_placeholder(version: Optional[str]) -> bool:
    """Return True for property placeholders such as ``${spring.version}``."""
    return (
        isinstance(version, str)
        and version.startswith(Constants.PLACEHOLDER_PREFIX)
        and version.endswith(Constants.PLACEHOLDER_SUFFIX)
    )


class DependencyRecord:  # pylint: disable=too-many-instance-attributes
    """A declared dependency plus the enrichment produced by a lookup pass.

    ``outdated`` is derived from ``latest_version`` and the declared version;
    assigning ``latest_version`` is the only way to change it.
    """

    def __init__(
        self,
        group_id: str,
        artifact_id: str,
        version: Optional[str] = None,
        scope: Optional[str] = None,
        type: Optional[str] = None,  # pylint: disable=redefined-builtin
        classifier: Optional[str] = None,
        optional: bool = False,
    ):
        self.group_id = group_id
        self.artifact_id = artifact_id
        self.version = version
        self.scope = scope
        self.type = type
        self.classifier = classifier
        self.optional = optional

        self._latest_version: Optional[str] = None
        self.available_versions: List[str] = []
        self.has_conflicts = False
        self.conflict_details: Optional[str] = None
        self.repository_url: Optional[str] = None
        self.local_path: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    @property
    def latest_version(self) -> Optional[str]:
        return self._latest_version

    @latest_version.setter
    def latest_version(self, value: Optional[str]) -> None:
        self._latest_version = value

    @property
    def outdated(self) -> bool:
        return self._latest_version is not None and self._latest_version != self.version

    @property
    def needs_lookup(self) -> bool:
        """False when the declared version is absent or an unexpanded placeholder."""
        return bool(self.version) and not is_placeholder(self.version)

    @property
    def coordinates(self) -> str:
        """Maven coordinates in ``group:artifact:version[:classifier][@type]`` form."""
        text = f"{self.group_id}:{self.artifact_id}:{self.version}"
        if self.classifier:
            text += f":{self.classifier}"
        if self.type is not None and self.type != "jar":
            text += f"@{self.type}"
        return text

    def _identity(self) -> Tuple[str, str, Optional[str], Optional[str]]:
        return (self.group_id, self.artifact_id, self.version, self.classifier)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyRecord):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        suffix = f" (OUTDATED: {self._latest_version})" if self.outdated else ""
        return f"DependencyRecord({self.coordinates}){suffix}"

    def to_dict(self) -> Dict[str, object]:
        """Serialize for JSON export."""
        return {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "version": self.version,
            "scope": self.scope,
            "type": self.type,
            "classifier": self.classifier,
            "optional": self.optional,
            "latestVersion": self._latest_version,
            "availableVersions": list(self.available_versions),
            "outdated": self.outdated,
            "hasConflicts": self.has_conflicts,
            "conflictDetails": self.conflict_details,
            "repositoryUrl": self.repository_url,
            "localPath": self.local_path,
        }


@dataclass
class Project:  # pylint: disable=too-many-instance-attributes
    """A parsed manifest: project coordinates plus declared dependencies."""
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    packaging: Optional[str] = None
    name: Optional[str] = None
    parent_coordinates: Optional[str] = None
    local_path: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    dependencies: List[DependencyRecord] = field(default_factory=list)
    managed_dependencies: List[DependencyRecord] = field(default_factory=list)
    repositories: List[RepositoryDescriptor] = field(default_factory=list)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def all_dependencies(self) -> List[DependencyRecord]:
        """Regular dependencies followed by managed ones."""
        return list(self.dependencies) + list(self.managed_dependencies)

    def outdated_dependencies(self) -> List[DependencyRecord]:
        return [d for d in self.all_dependencies() if d.outdated]

    def dependencies_with_conflicts(self) -> List[DependencyRecord]:
        return [d for d in self.all_dependencies() if d.has_conflicts]


def parse_coordinate(text: str) -> DependencyRecord:
    """Parse ``group:artifact[:version]`` into a DependencyRecord.

    Raises:
        ValueError: Fewer than two or more than three non-empty parts.
    """
    parts = [p.strip() for p in (text or "").split(":")]
    if len(parts) not in (2, 3) or not all(parts):
        raise ValueError(f"Expected group:artifact[:version], got '{text}'")
    return DependencyRecord(parts[0], parts[1], parts[2] if len(parts) == 3 else None)
