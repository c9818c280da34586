"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    EXIT_WARNINGS = 3


class VersionOrdering(Enum):
    """Comparison modes for version strings.

    Args:
        Enum (string): Ordering mode names accepted on the CLI and in config.
    """

    LEXICOGRAPHIC = "lexicographic"
    SEMANTIC = "semantic"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MAVEN_CENTRAL_SEARCH_URL = "https://search.maven.org/solrsearch/select"
    METADATA_FILE = "maven-metadata.xml"
    POM_XML_FILE = "pom.xml"
    SETTINGS_XML_FILE = "settings.xml"
    DEFAULT_EXTENSION = "jar"
    DEFAULT_LAYOUT = "default"
    LOCAL_REPOSITORY_ID = "local"
    LOCAL_REPOSITORY_NAME = "Local Repository"
    ENV_M2_HOME = "M2_HOME"
    ENV_LOG_LEVEL = "DEPSCOUT_LOG_LEVEL"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 10  # Timeout in seconds for a single HTTP request
    FANOUT_TIMEOUT = 15  # Collection budget in seconds for one coordinate
    FANOUT_MAX_WORKERS = 10
    SEARCH_ROWS = 20
    RECENT_VERSIONS = 5
    HTTP_RETRY_MAX = 1  # Attempts per request; transport errors only
    ORDERING = VersionOrdering.LEXICOGRAPHIC

    PLACEHOLDER_PREFIX = "${"
    PLACEHOLDER_SUFFIX = "}"
    TREE_MANAGED_MARKER = "(version managed from "

    DEFAULT_STRATEGIES = ("metadata", "search", "listing")

    # (id, name, url, search endpoint or None)
    DEFAULT_REPOSITORIES = [
        ("central", "Maven Central", "https://repo.maven.apache.org/maven2/", MAVEN_CENTRAL_SEARCH_URL),
        ("google", "Google Maven", "https://maven.google.com/", None),
        ("jcenter", "JCenter", "https://jcenter.bintray.com/", None),
        ("spring", "Spring Releases", "https://repo.spring.io/release/", None),
        ("atlassian", "Atlassian Public", "https://packages.atlassian.com/maven-external/", None),
    ]
