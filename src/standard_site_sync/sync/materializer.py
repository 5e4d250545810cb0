"""Rebuild a vault note from a remote document record.

The frontmatter block is written line by line rather than through a YAML
emitter: the output is a small, human-edited header and every scalar
goes through ``escape_yaml_scalar`` so a YAML reader gets back exactly
the remote string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from standard_site_sync.records import MARKDOWN_CONTENT_TYPE
from standard_site_sync.validators import sanitize_remote_path

_NEEDS_QUOTING_RE = re.compile(r"[\\\":#{}\[\],&*?|>!%@`'\t\n\r]")
_RESERVED_WORDS_RE = re.compile(
    r"^(true|false|null|yes|no|on|off)$", re.IGNORECASE
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
}

DEFAULT_DOCUMENT_PATH = "/untitled"


@dataclass(frozen=True)
class PulledNote:
    """Local note text rebuilt from a remote record.

    Attributes:
        frontmatter: Frontmatter block including the ``---`` fences.
        body: Markdown body.
        relative_path: Sanitised vault-relative file path ending in ``.md``.
    """

    frontmatter: str
    body: str
    relative_path: str


def _needs_quoting(value: str) -> bool:
    return (
        value == ""
        or bool(_NEEDS_QUOTING_RE.search(value))
        or value != value.strip()
        or value.startswith(("-", "?"))
        or bool(_RESERVED_WORDS_RE.match(value))
    )


def escape_yaml_scalar(value: str) -> str:
    """Quote *value* for a frontmatter line when YAML would misread it.

    Examples:
        >>> escape_yaml_scalar("Plain title")
        'Plain title'
        >>> escape_yaml_scalar('My: "Fancy" Title')
        '"My: \\\\"Fancy\\\\" Title"'
        >>> escape_yaml_scalar("yes")
        '"yes"'
    """
    if not _needs_quoting(value):
        return value
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in value)
    return f'"{escaped}"'


def format_yaml_array(items: Iterable[str]) -> str:
    """Render a flow sequence, escaping each element."""
    return "[" + ", ".join(escape_yaml_scalar(item) for item in items) + "]"


def _string_field(value: Mapping[str, Any], key: str) -> str | None:
    field_value = value.get(key)
    if isinstance(field_value, str) and field_value:
        return field_value
    return None


def _extract_body(value: Mapping[str, Any]) -> str:
    content = value.get("content")
    if (
        isinstance(content, Mapping)
        and content.get("$type") == MARKDOWN_CONTENT_TYPE
        and isinstance(content.get("text"), str)
        and content["text"]
    ):
        return content["text"]
    return _string_field(value, "textContent") or ""


def build_note_from_record(
    rkey: str, value: Mapping[str, Any]
) -> PulledNote:
    """Materialise a document record as local note text.

    Args:
        rkey: Record key, written to the ``rkey`` frontmatter key.
        value: Raw document record value.

    Returns:
        PulledNote with frontmatter, body and the target file path.

    Raises:
        UnsafeRemotePathError: The record's ``path`` contains traversal
            segments or control characters.
    """
    relative_path = (
        sanitize_remote_path(
            _string_field(value, "path") or DEFAULT_DOCUMENT_PATH
        )
        or DEFAULT_DOCUMENT_PATH.lstrip("/")
    ) + ".md"

    lines = ["---"]
    title = _string_field(value, "title")
    if title:
        lines.append(f"title: {escape_yaml_scalar(title)}")
    lines.append("publish: true")
    lines.append(f"rkey: {escape_yaml_scalar(rkey)}")
    description = _string_field(value, "description")
    if description:
        lines.append(f"description: {escape_yaml_scalar(description)}")
    tags = value.get("tags")
    if isinstance(tags, list):
        tag_values = [t for t in tags if isinstance(t, str)]
        if tag_values:
            lines.append(f"tags: {format_yaml_array(tag_values)}")
    published_at = _string_field(value, "publishedAt")
    if published_at:
        lines.append(f"date: {escape_yaml_scalar(published_at)}")
    lines.append("---")

    return PulledNote(
        frontmatter="\n".join(lines),
        body=_extract_body(value),
        relative_path=relative_path,
    )


def render_note(note: PulledNote) -> str:
    """Full note text: frontmatter, blank line, body."""
    return f"{note.frontmatter}\n\n{note.body}"
