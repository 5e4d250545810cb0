"""File handler module: vault path validation, encoding-aware read/write, frontmatter.

Provides the file I/O used by the local vault host. Frontmatter parsing
and dumping go through PyYAML's safe loader/dumper.
"""

import re
from pathlib import Path, PurePosixPath
from typing import Any

import yaml
from charset_normalizer import from_bytes

# YAML front-matter block at the very start of a note
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)

# =============================================================================
# Path Validation
# =============================================================================


def validate_vault_path(root: Path, rel_path: str) -> Path:
    """Resolve a vault-relative path, refusing anything outside the vault.

    Args:
        root: Vault root directory.
        rel_path: POSIX-style path relative to *root*.

    Returns:
        Resolved absolute Path (need not exist).

    Raises:
        ValueError: If the path is absolute or resolves outside *root*.
    """
    if PurePosixPath(rel_path).is_absolute() or Path(rel_path).is_absolute():
        raise ValueError(f"Path must be relative to the vault: {rel_path}")
    root_resolved = root.resolve()
    resolved = (root_resolved / rel_path).resolve()
    if not resolved.is_relative_to(root_resolved):
        raise ValueError(
            f"Path is outside the vault: {resolved} not under {root_resolved}"
        )
    return resolved


# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # ascii is a strict subset of utf-8
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def write_file(path: Path, content: str, encoding: str = "utf-8") -> int:
    """Write content to a file, creating parent directories as needed.

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode(encoding)
    path.write_bytes(encoded)
    return len(encoded)


def create_file_exclusive(
    path: Path, content: str, encoding: str = "utf-8"
) -> int:
    """Create a new file; never overwrite.

    Raises:
        FileExistsError: If *path* already exists.
    """
    encoded = content.encode(encoding)
    with open(path, "xb") as fh:
        fh.write(encoded)
    return len(encoded)


# =============================================================================
# Frontmatter
# =============================================================================


def split_frontmatter(
    content: str, strict: bool = False
) -> tuple[dict[str, Any], str]:
    """Split a leading YAML frontmatter block from the note body.

    Returns ``(metadata, body)``. ``metadata`` is empty when there is no
    block or the block is not a YAML mapping.

    Raises:
        ValueError: If *strict* and a block exists but is not a mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        if strict:
            raise ValueError(f"Invalid frontmatter: {exc}") from exc
        data = None
    if data is None:
        data = {}
    if not isinstance(data, dict):
        if strict:
            raise ValueError("Frontmatter is not a mapping")
        data = {}
    return data, content[match.end() :]


def join_frontmatter(data: dict[str, Any], body: str) -> str:
    """Prepend *data* as a frontmatter block; no block when *data* is empty."""
    if not data:
        return body
    dumped = yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=None
    )
    return f"---\n{dumped}---\n{body}"
