"""Tests for muxr.routing.pattern — parsing, matching, specificity."""

import pytest

from muxr.errors import ConfigurationError, PatternError
from muxr.routing.pattern import (
    Segment,
    SegmentKind,
    SlashMode,
    parse_pattern,
    split_path,
)


class TestSplitPath:
    def test_root(self) -> None:
        assert split_path("/") == []

    def test_simple(self) -> None:
        assert split_path("/a/b") == ["a", "b"]

    def test_trailing_slash_dropped(self) -> None:
        assert split_path("/hello/") == ["hello"]

    def test_empty_interior_segment_kept(self) -> None:
        assert split_path("/a//b") == ["a", "", "b"]

    def test_empty_path(self) -> None:
        assert split_path("") == []


class TestParsePattern:
    def test_root_is_directory(self) -> None:
        pattern = parse_pattern("/")
        assert pattern.segments == ()
        assert pattern.mode is SlashMode.TRAILING
        assert pattern.is_catch_all

    def test_literals(self) -> None:
        pattern = parse_pattern("/api/v2/users")
        assert [s.value for s in pattern.segments] == ["api", "v2", "users"]
        assert all(s.kind is SegmentKind.LITERAL for s in pattern.segments)
        assert pattern.mode is SlashMode.NONE

    def test_wildcard(self) -> None:
        pattern = parse_pattern("/users/{id}")
        assert pattern.segments[1] == Segment(kind=SegmentKind.WILDCARD, value="id")

    def test_remainder(self) -> None:
        pattern = parse_pattern("/files/{path...}")
        assert pattern.segments[1] == Segment(kind=SegmentKind.REMAINDER, value="path")

    def test_trailing_slash(self) -> None:
        pattern = parse_pattern("/static/")
        assert pattern.mode is SlashMode.TRAILING
        assert pattern.is_directory
        assert not pattern.is_catch_all

    @pytest.mark.parametrize("raw", ["/static", "/static/{$}", "/{rest...}"])
    def test_closed_end_is_not_directory(self, raw: str) -> None:
        assert not parse_pattern(raw).is_directory

    def test_strict_end(self) -> None:
        pattern = parse_pattern("/hello/{$}")
        assert [s.value for s in pattern.segments] == ["hello"]
        assert pattern.mode is SlashMode.STRICT

    def test_strict_root(self) -> None:
        pattern = parse_pattern("/{$}")
        assert pattern.segments == ()
        assert pattern.mode is SlashMode.STRICT

    def test_str_is_raw(self) -> None:
        assert str(parse_pattern("/users/{id}")) == "/users/{id}"

    def test_frozen(self) -> None:
        pattern = parse_pattern("/")
        with pytest.raises(AttributeError):
            pattern.raw = "/other"  # type: ignore[misc]


class TestMalformedPatterns:
    @pytest.mark.parametrize(
        "raw",
        [
            "users",
            "",
            "/a//b",
            "//",
            "/a{b}",
            "/{a}b",
            "/{}",
            "/{1abc}",
            "/{a-b}",
            "/{a\n}",
            "/{a\n...}",
            "/{id}/{id}",
            "/{rest...}/more",
            "/{a...}/{b...}",
            "/{rest...}/",
            "/{rest...}/{$}",
            "/a/{$}/b",
            "/a{$}",
            "/{$}/",
        ],
    )
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(PatternError) as exc_info:
            parse_pattern(raw)
        assert exc_info.value.pattern == raw
        assert repr(raw) in str(exc_info.value)

    def test_pattern_error_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_pattern("no-slash")


class TestMatch:
    def test_literal(self) -> None:
        found = parse_pattern("/users").match("/users")
        assert found is not None
        assert found.params == {}

    def test_literal_is_case_sensitive(self) -> None:
        assert parse_pattern("/users").match("/Users") is None

    def test_no_match_on_extra_segments(self) -> None:
        assert parse_pattern("/users").match("/users/42") is None

    def test_no_match_on_missing_segments(self) -> None:
        assert parse_pattern("/users/{id}").match("/users") is None

    def test_wildcard_binds(self) -> None:
        found = parse_pattern("/users/{id}/posts/{post}").match("/users/7/posts/99")
        assert found is not None
        assert found.params == {"id": "7", "post": "99"}

    def test_wildcard_rejects_empty_segment(self) -> None:
        assert parse_pattern("/a/{x}/b").match("/a//b") is None

    def test_remainder_joins_segments(self) -> None:
        found = parse_pattern("/files/{path...}").match("/files/a/b/c.txt")
        assert found is not None
        assert found.params == {"path": "a/b/c.txt"}

    def test_remainder_needs_one_segment(self) -> None:
        pattern = parse_pattern("/files/{path...}")
        assert pattern.match("/files") is None
        assert pattern.match("/files/") is None

    def test_remainder_drops_trailing_slash(self) -> None:
        found = parse_pattern("/files/{path...}").match("/files/docs/")
        assert found is not None
        assert found.params == {"path": "docs"}

    @pytest.mark.parametrize(
        "raw",
        [
            "/hello",
            "/hello/",
            "/hello/{$}",
            "/{hello}",
            "/{hello}/",
            "/{hello}/{$}",
            "/{hello...}",
        ],
    )
    def test_trailing_slash_on_request_is_tolerated(self, raw: str) -> None:
        pattern = parse_pattern(raw)
        assert pattern.match("/hello") is not None
        assert pattern.match("/hello/") is not None

    def test_directory_matches_deeper_paths(self) -> None:
        pattern = parse_pattern("/static/")
        found = pattern.match("/static/css/site.css")
        assert found is not None
        assert found.rank == (3, 0, 0)

    def test_strict_end_rejects_deeper_paths(self) -> None:
        assert parse_pattern("/hello/{$}").match("/hello/world") is None

    def test_strict_root_only_matches_root(self) -> None:
        pattern = parse_pattern("/{$}")
        assert pattern.match("/") is not None
        assert pattern.match("/a") is None

    @pytest.mark.parametrize("path", ["/", "/hello", "/hello/", "/a/b/c"])
    def test_catch_all(self, path: str) -> None:
        assert parse_pattern("/").match(path) is not None


class TestSpecificity:
    def _rank(self, raw: str, path: str) -> tuple[int, ...]:
        found = parse_pattern(raw).match(path)
        assert found is not None
        return found.rank

    def test_literal_beats_wildcard(self) -> None:
        assert self._rank("/users/new", "/users/new") > self._rank("/users/{id}", "/users/new")

    def test_longer_literal_prefix_wins(self) -> None:
        assert self._rank("/a/{b}", "/a/b") > self._rank("/{a}/b", "/a/b")

    def test_wildcard_beats_remainder(self) -> None:
        assert self._rank("/users/{id}", "/users/7") > self._rank("/users/{rest...}", "/users/7")

    def test_remainder_beats_directory(self) -> None:
        assert self._rank("/users/{rest...}", "/users/7") > self._rank("/users/", "/users/7")

    def test_catch_all_is_least_specific(self) -> None:
        assert self._rank("/{rest...}", "/x/y") > self._rank("/", "/x/y")

    def test_equivalent_patterns_tie(self) -> None:
        assert self._rank("/hello", "/hello") == self._rank("/hello/{$}", "/hello/")


class TestCovers:
    def test_literal_prefix(self) -> None:
        prefix = parse_pattern("/api")
        assert prefix.covers(["api"])
        assert prefix.covers(["api", "v1", "users"])
        assert not prefix.covers(["apis"])
        assert not prefix.covers([])

    def test_wildcard_prefix(self) -> None:
        prefix = parse_pattern("/{tenant}/admin")
        assert prefix.covers(["acme", "admin", "users"])
        assert not prefix.covers(["acme", "public"])

    def test_root_covers_everything(self) -> None:
        assert parse_pattern("/").covers([])
        assert parse_pattern("/").covers(["anything"])

    def test_remainder_prefix_needs_a_segment(self) -> None:
        prefix = parse_pattern("/files/{rest...}")
        assert prefix.covers(["files", "a"])
        assert not prefix.covers(["files"])
