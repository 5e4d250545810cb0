"""
Input validation for note paths and paths taken from remote records.

Remote record values are writable by third parties, so any path read
from one must pass ``sanitize_remote_path`` before it touches the local
file system.
"""

import re

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


# ---------------------------------------------------------------------------
# Error message formatting helpers
# ---------------------------------------------------------------------------


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Note path")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


# ---------------------------------------------------------------------------
# Remote path sanitisation
# ---------------------------------------------------------------------------


class UnsafeRemotePathError(ValueError):
    """A remote record declared a path that is unsafe to write locally.

    Attributes:
        segment: The offending path segment.
    """

    def __init__(self, message: str, segment: str):
        super().__init__(message)
        self.segment = segment


class InvalidPathSegmentError(UnsafeRemotePathError):
    """Path contains a ``.`` or ``..`` segment."""


class InvalidPathCharactersError(UnsafeRemotePathError):
    """Path segment contains NUL or other control characters."""


def sanitize_remote_path(path: str) -> str:
    """Reduce a remote document path to safe, vault-relative segments.

    Leading slashes and empty segments (``a//b``) are dropped.

    Args:
        path: The ``path`` field of a remote document record.

    Returns:
        ``/``-joined surviving segments (may be empty).

    Raises:
        InvalidPathSegmentError: A segment is ``.`` or ``..``.
        InvalidPathCharactersError: A segment contains a control character.
    """
    segments: list[str] = []
    for segment in path.lstrip("/").split("/"):
        if segment == "":
            continue
        if segment in (".", ".."):
            raise InvalidPathSegmentError(
                f'Invalid path segment in remote record: "{segment}"',
                segment,
            )
        if _CONTROL_CHARS_RE.search(segment):
            raise InvalidPathCharactersError(
                f"Invalid characters in path segment: {segment!r}",
                segment,
            )
        segments.append(segment)
    return "/".join(segments)


# ---------------------------------------------------------------------------
# Local note paths
# ---------------------------------------------------------------------------


def validate_note_path(file_path: str) -> tuple[bool, str]:
    """
    Validate a vault-relative note path given on the command line.

    Args:
        file_path: The note path to validate

    Returns:
        Tuple of (is_valid, error_message).
        Returns (True, "") if valid, (False, reason) if invalid.

    Validation rules:
        - Cannot be empty or whitespace-only
        - Must be relative
        - Cannot contain '..' segments
        - Must name a markdown (.md) file
    """
    if not file_path or not file_path.strip():
        return (
            False,
            format_validation_error("Note path", "cannot be empty"),
        )

    if file_path.startswith("/"):
        return (
            False,
            format_validation_error(
                "Note path", "must be relative to the vault root"
            ),
        )

    if ".." in file_path.split("/"):
        return (
            False,
            format_validation_error("Note path", "cannot contain '..'"),
        )

    if not file_path.endswith(".md"):
        return (
            False,
            format_validation_error(
                "Note path", "must name a markdown (.md) file"
            ),
        )

    return (True, "")
