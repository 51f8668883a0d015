# tests/unit/test_models.py: Unit tests for the core value types.

from regionbuild.models import (
    CacheKey,
    Changeset,
    Head,
    PlainRevision,
    PullRequestRevision,
    affected_files,
    parse_regions,
)


def test_parse_regions_trims_and_drops_blank_lines():
    text = "  src/**  \n\n\tdocs/**/*.md\r\n   \n"
    assert parse_regions(text) == ["src/**", "docs/**/*.md"]


def test_parse_regions_empty_inputs():
    assert parse_regions("") == []
    assert parse_regions(None) == []
    assert parse_regions(" \n  \n") == []


def test_affected_files_unions_in_first_seen_order():
    changesets = [
        Changeset("c3", ("src/a.py", "docs/x.md")),
        Changeset("c2", ("src/a.py",)),
        Changeset("c1", ("README.md",)),
    ]
    assert affected_files(changesets) == ["src/a.py", "docs/x.md", "README.md"]
    assert affected_files([]) == []


def test_revision_strings_and_equality():
    feature = Head("feature")
    assert str(PlainRevision(feature, "abc")) == "abc"
    assert PlainRevision(feature, "abc") == PlainRevision(Head("feature"), "abc")

    pr = Head("PR-7", target=Head("main"))
    revision = PullRequestRevision(
        pr, pull=PlainRevision(pr, "p1"), target=PlainRevision(pr.target, "t1")
    )
    assert str(revision) == "p1+t1"
    assert pr.is_pull_request is True
    assert feature.is_pull_request is False
    assert str(pr) == "PR-7 -> main"


def test_cache_key_is_structural():
    """Keys compare by their fields, not by a formatted string."""
    head = Head("feature")
    a = CacheKey(PlainRevision(head, "1"), PlainRevision(head, "2"), "main")
    b = CacheKey(PlainRevision(head, "1"), PlainRevision(head, "2"), "main")
    c = CacheKey(PlainRevision(head, "1 -> 2"), PlainRevision(head, ""), "main")
    assert a == b and hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2
