"""Tests for declared-version and dependency-tree conflict detection."""

import logging

import pytest

from versioning.conflicts import detect_conflicts, detect_tree_conflicts, group_by_coordinate, parse_tree_line
from versioning.models import Coordinate, DependencyRecord


def _records(versions, group="g", artifact="a"):
    return [DependencyRecord(group, artifact, v) for v in versions]


def test_differing_versions_flag_every_member():
    records = _records(["1.0", "1.0", "2.0"])

    flagged = detect_conflicts(records)

    assert flagged == records
    for record in records:
        assert record.has_conflicts is True
        assert "1.0" in record.conflict_details
        assert "2.0" in record.conflict_details
    assert records[0].conflict_details == "Multiple versions found: 1.0, 2.0"


def test_identical_versions_are_not_conflicts():
    records = _records(["1.0", "1.0", "1.0"])

    assert detect_conflicts(records) == []
    assert not any(r.has_conflicts for r in records)
    assert all(r.conflict_details is None for r in records)


def test_null_versions_are_ignored():
    records = _records([None, "1.0"])

    assert detect_conflicts(records) == []


def test_single_declaration_never_conflicts():
    records = _records(["1.0"]) + _records(["2.0"], artifact="b")

    assert detect_conflicts(records) == []


def test_groups_are_independent():
    a = _records(["1.0", "2.0"], artifact="a")
    b = _records(["3.0", "3.0"], artifact="b")

    flagged = detect_conflicts(a + b)

    assert flagged == a
    assert not any(r.has_conflicts for r in b)


def test_group_by_coordinate_preserves_order():
    records = _records(["1"], artifact="z") + _records(["1"], artifact="a") + _records(["2"], artifact="z")
    groups = group_by_coordinate(records)
    assert list(groups) == [Coordinate("g", "z"), Coordinate("g", "a")]
    assert len(groups[Coordinate("g", "z")]) == 2


TREE = """[INFO] com.example:app:jar:1.0
[INFO] +- org.springframework:spring-core:jar:5.3.20:compile
[INFO] |  \\- commons-collections:commons-collections:jar:3.2.1:compile (version managed from 3.1)
[INFO] +- junit:junit:jar:tests:4.13.2:test (version managed from 4.12; scope managed from compile)
[INFO] +- garbage line (version managed from 1.0)
[INFO] \\- org.other:unknown:jar:2.0:compile (version managed from 1.5)
"""


class TestTreeConflicts:
    """Best-effort parsing of rendered dependency trees."""

    def test_parse_tree_line(self):
        line = "[INFO] |  \\- commons-collections:commons-collections:jar:3.2.1:compile (version managed from 3.1)"
        assert parse_tree_line(line) == ("commons-collections", "commons-collections", "3.1", "3.2.1")

    def test_parse_tree_line_with_classifier(self):
        line = "[INFO] +- junit:junit:jar:tests:4.13.2:test (version managed from 4.12)"
        assert parse_tree_line(line) == ("junit", "junit", "4.12", "4.13.2")

    def test_lines_without_marker_are_ignored(self):
        assert parse_tree_line("[INFO] +- g:a:jar:1.0:compile") is None

    def test_malformed_marker_line_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_tree_line("[INFO] +- garbage line (version managed from 1.0)")

    def test_detect_tree_conflicts(self, caplog):
        collections = DependencyRecord("commons-collections", "commons-collections", "3.2.1")
        junit = DependencyRecord("junit", "junit", "4.13.2")
        untouched = DependencyRecord("org.springframework", "spring-core", "5.3.20")

        with caplog.at_level(logging.WARNING):
            flagged = detect_tree_conflicts([collections, junit, untouched], TREE)

        assert flagged == [collections, junit]
        assert collections.conflict_details == "Version conflict: 3.1 -> 3.2.1"
        assert junit.conflict_details == "Version conflict: 4.12 -> 4.13.2"
        assert untouched.has_conflicts is False
        assert "garbage line" in caplog.text

    def test_empty_tree(self):
        assert detect_tree_conflicts([DependencyRecord("g", "a", "1")], "") == []

    def test_every_declaration_of_a_managed_coordinate_is_flagged(self):
        regular = DependencyRecord("org.example", "lib", "1.0")
        managed = DependencyRecord("org.example", "lib", "1.0")
        tree = "[INFO] +- org.example:lib:jar:2.0:compile (version managed from 1.0)\n"

        flagged = detect_tree_conflicts([regular, managed], tree)

        assert flagged == [regular, managed]
        assert flagged[0] is regular and flagged[1] is managed
        assert regular.conflict_details == managed.conflict_details == "Version conflict: 1.0 -> 2.0"
