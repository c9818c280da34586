"""Tests for the repository version source strategies."""

from unittest.mock import patch

from registry.maven import sources
from registry.maven.layout import artifact_dir_url, artifact_url, metadata_url
from registry.maven.sources import (
    fetch_listing_versions,
    fetch_metadata_versions,
    fetch_search_versions,
    fetch_versions,
    parse_metadata_versions,
    parse_listing_versions,
    parse_search_versions,
)
from versioning.models import Coordinate, RepositoryDescriptor, VersionSet

COORD = Coordinate("org.example", "lib")
REPO = RepositoryDescriptor(id="central", name="Maven Central", url="https://repo.example.org/maven2")
SEARCH_REPO = RepositoryDescriptor(
    id="central", name="Maven Central", url="https://repo.example.org/maven2/",
    search_url="https://search.example.org/solrsearch/select",
)

METADATA = """<?xml version="1.0" encoding="UTF-8"?>
<metadata>
  <groupId>org.example</groupId>
  <artifactId>lib</artifactId>
  <versioning>
    <latest>2.0</latest>
    <release>2.0</release>
    <versions>
      <version>1.9</version>
      <version>1.10</version>
      <version>2.0</version>
    </versions>
  </versioning>
</metadata>
"""

LISTING = """<html><body><pre>
<a href="../">../</a>
<a href="1.0/">1.0/</a>
<a href="1.2.3-RC1/">1.2.3-RC1/</a>
<a href="maven-metadata.xml">maven-metadata.xml</a>
<a href="beta/">beta/</a>
</pre></body></html>
"""


class TestUrls:
    """URL construction must match the Maven layout byte for byte."""

    def test_base_url_normalized_to_single_separator(self):
        assert metadata_url("https://r.example/m2", "org.example", "lib") == \
            "https://r.example/m2/org/example/lib/maven-metadata.xml"
        assert metadata_url("https://r.example/m2//", "org.example", "lib") == \
            "https://r.example/m2/org/example/lib/maven-metadata.xml"

    def test_artifact_url(self):
        assert artifact_url("https://r.example/m2/", "org.example", "lib", "1.0") == \
            "https://r.example/m2/org/example/lib/1.0"

    def test_artifact_dir_url(self):
        assert artifact_dir_url("https://r.example/m2", "g", "a") == "https://r.example/m2/g/a/"


class TestParsers:
    """Response parsers."""

    def test_metadata_versions_in_source_order(self):
        assert parse_metadata_versions(METADATA) == ["1.9", "1.10", "2.0"]

    def test_metadata_falls_back_to_release_then_latest(self):
        doc = "<metadata><versioning><release>1.0</release><latest>1.1-SNAPSHOT</latest></versioning></metadata>"
        assert parse_metadata_versions(doc) == ["1.0", "1.1-SNAPSHOT"]

    def test_metadata_fallback_does_not_duplicate(self):
        doc = "<metadata><versioning><release>1.0</release><latest>1.0</latest><versions/></versioning></metadata>"
        assert parse_metadata_versions(doc) == ["1.0"]

    def test_metadata_tolerates_namespace(self):
        doc = ('<metadata xmlns="http://maven.apache.org/METADATA/1.1.0"><versioning>'
               '<versions><version>3.0</version></versions></versioning></metadata>')
        assert parse_metadata_versions(doc) == ["3.0"]

    def test_listing_versions_start_with_digit_and_end_with_separator(self):
        assert parse_listing_versions(LISTING) == ["1.0", "1.2.3-RC1"]

    def test_search_versions(self):
        payload = {"response": {"numFound": 1, "docs": [
            {"g": "org.example", "a": "lib", "latestVersion": "2.0", "v": ["1.0", "1.5"]}
        ]}}
        assert parse_search_versions(payload) == ["1.0", "1.5", "2.0"]

    def test_search_latest_only(self):
        payload = {"response": {"docs": [{"latestVersion": "2.0"}]}}
        assert parse_search_versions(payload) == ["2.0"]

    def test_search_empty_or_malformed(self):
        assert parse_search_versions({"response": {"docs": []}}) == []
        assert parse_search_versions(None) == []
        assert parse_search_versions({"unexpected": True}) == []
        assert parse_search_versions({"response": {"docs": {"a": 1}}}) == []
        assert parse_search_versions({"response": "error"}) == []
        assert parse_search_versions({"response": [1, 2]}) == []


class TestStrategies:
    """Fetching strategies recover every failure as None."""

    @patch("registry.maven.sources.robust_get")
    def test_metadata_strategy_sorts_lexicographically(self, mock_get):
        mock_get.return_value = (200, {}, METADATA)

        result = fetch_metadata_versions(REPO, COORD)

        mock_get.assert_called_once_with(
            "https://repo.example.org/maven2/org/example/lib/maven-metadata.xml", context="central"
        )
        assert result.source_id == "central"
        assert result.versions == ["1.10", "1.9", "2.0"]
        assert result.latest == "2.0"

    @patch("registry.maven.sources.robust_get")
    def test_metadata_strategy_non_200(self, mock_get):
        mock_get.return_value = (404, {}, "Not Found")
        assert fetch_metadata_versions(REPO, COORD) is None

    @patch("registry.maven.sources.robust_get")
    def test_metadata_strategy_unparseable(self, mock_get):
        mock_get.return_value = (200, {}, "<metadata><versioning>")
        assert fetch_metadata_versions(REPO, COORD) is None

    @patch("registry.maven.sources.robust_get")
    def test_metadata_strategy_transport_failure(self, mock_get):
        mock_get.return_value = (0, {}, "Request failed after 1 attempts: timeout")
        assert fetch_metadata_versions(REPO, COORD) is None

    @patch("registry.maven.sources.robust_get")
    def test_listing_strategy(self, mock_get):
        mock_get.return_value = (200, {}, LISTING)

        result = fetch_listing_versions(REPO, COORD)

        mock_get.assert_called_once_with("https://repo.example.org/maven2/org/example/lib/", context="central")
        assert result.versions == ["1.0", "1.2.3-RC1"]

    @patch("registry.maven.sources.get_json")
    def test_search_strategy_query(self, mock_get_json):
        mock_get_json.return_value = (200, {}, {"response": {"docs": [{"latestVersion": "2.0", "v": ["1.0"]}]}})

        result = fetch_search_versions(SEARCH_REPO, COORD)

        args, kwargs = mock_get_json.call_args
        assert args[0] == "https://search.example.org/solrsearch/select"
        assert kwargs["params"]["q"] == "g:org.example AND a:lib"
        assert kwargs["params"]["wt"] == "json"
        assert result.versions == ["1.0", "2.0"]

    @patch("registry.maven.sources.get_json")
    def test_search_strategy_skipped_without_endpoint(self, mock_get_json):
        assert fetch_search_versions(REPO, COORD) is None
        mock_get_json.assert_not_called()


class TestFetchVersions:
    """Ordered fallback across a descriptor's strategies."""

    def test_first_non_empty_strategy_wins(self):
        calls = []

        def empty(descriptor, coordinate, ordering=None):
            calls.append("metadata")
            return None

        def listing(descriptor, coordinate, ordering=None):
            calls.append("listing")
            return VersionSet(descriptor.id, ["1.0"])

        def never(descriptor, coordinate, ordering=None):
            raise AssertionError("should not be reached")

        table = {"metadata": empty, "search": lambda d, c, o=None: VersionSet(d.id, []), "listing": listing,
                 "extra": never}
        repo = RepositoryDescriptor(id="r", name="R", url="https://r.example/",
                                    strategies=("metadata", "search", "listing", "extra"))

        result = fetch_versions(repo, COORD, strategies=table)

        assert result.versions == ["1.0"]
        assert calls == ["metadata", "listing"]

    def test_unknown_strategy_is_skipped(self):
        repo = RepositoryDescriptor(id="r", name="R", url="https://r.example/", strategies=("bogus",))
        assert fetch_versions(repo, COORD, strategies={}) is None

    def test_default_table_used(self, monkeypatch):
        monkeypatch.setattr(sources, "STRATEGIES", {"metadata": lambda d, c, o=None: VersionSet(d.id, ["9"])})
        repo = RepositoryDescriptor(id="r", name="R", url="https://r.example/", strategies=("metadata",))
        assert fetch_versions(repo, COORD).versions == ["9"]

    @patch("registry.maven.sources.robust_get")
    @patch("registry.maven.sources.get_json")
    def test_malformed_search_payload_falls_through_to_listing(self, mock_get_json, mock_get):
        mock_get_json.return_value = (200, {}, {"response": {"docs": {"a": 1}}})
        mock_get.return_value = (200, {}, '<a href="1.0/">1.0/</a>')
        repo = RepositoryDescriptor(id="r", name="R", url="https://r.example/",
                                    strategies=("search", "listing"),
                                    search_url="https://r.example/solrsearch/select")

        result = fetch_versions(repo, COORD)

        assert result.versions == ["1.0"]

    def test_failing_strategy_does_not_stop_fallback(self, caplog):
        def broken(descriptor, coordinate, ordering=None):
            raise KeyError(0)

        table = {"search": broken, "listing": lambda d, c, o=None: VersionSet(d.id, ["2.0"])}
        repo = RepositoryDescriptor(id="r", name="R", url="https://r.example/", strategies=("search", "listing"))

        assert fetch_versions(repo, COORD, strategies=table).versions == ["2.0"]
        assert "Version strategy 'search' failed" in caplog.text
