"""Tests for validators: remote path sanitisation and note path checks."""

import pytest

from standard_site_sync.validators import (
    InvalidPathCharactersError,
    InvalidPathSegmentError,
    format_validation_error,
    sanitize_remote_path,
    validate_note_path,
)


class TestFormatValidationError:
    def test_format(self):
        assert (
            format_validation_error("Note path", "cannot be empty")
            == "Note path cannot be empty"
        )


class TestSanitizeRemotePath:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/blog/post", "blog/post"),
            ("blog/post", "blog/post"),
            ("//a///b//", "a/b"),
            ("/", ""),
            ("", ""),
            ("/my file/ünïcode", "my file/ünïcode"),
            ("/a/...", "a/..."),
            ("/a/.hidden", "a/.hidden"),
        ],
    )
    def test_safe_paths(self, path, expected):
        assert sanitize_remote_path(path) == expected

    @pytest.mark.parametrize("path", ["/..", "/a/../b", "./x", "/a/./b"])
    def test_dot_segments_rejected(self, path):
        with pytest.raises(InvalidPathSegmentError, match="Invalid path segment"):
            sanitize_remote_path(path)

    @pytest.mark.parametrize(
        "segment", ["a\x00b", "tab\there", "new\nline", "del\x7f", "\x1f"]
    )
    def test_control_characters_rejected(self, segment):
        with pytest.raises(InvalidPathCharactersError) as exc_info:
            sanitize_remote_path(f"/ok/{segment}")
        assert exc_info.value.segment == segment


class TestValidateNotePath:
    def test_valid(self):
        assert validate_note_path("blog/post.md") == (True, "")

    @pytest.mark.parametrize(
        "path,reason",
        [
            ("", "cannot be empty"),
            ("   ", "cannot be empty"),
            ("/abs/post.md", "must be relative"),
            ("../up.md", "cannot contain '..'"),
            ("a/../b.md", "cannot contain '..'"),
            ("image.png", "must name a markdown"),
        ],
    )
    def test_invalid(self, path, reason):
        ok, msg = validate_note_path(path)
        assert ok is False
        assert reason in msg
