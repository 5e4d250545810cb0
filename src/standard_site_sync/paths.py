"""Canonical document paths for published notes.

A note's document path is the matching key used by reconciliation, so
every function here is a pure string transform: same input, same output.
"""

import re

DOCUMENT_COLLECTION = "site.standard.document"
PUBLICATION_COLLECTION = "site.standard.publication"

_NOTE_EXTENSION = ".md"

_UNSAFE_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def slugify(text: str) -> str:
    """Turn a note name into a URL slug.

    Examples:
        >>> slugify("My First Post")
        'my-first-post'
        >>> slugify("--a--")
        'a'
    """
    slug = _UNSAFE_SLUG_CHARS.sub("", text.lower())
    slug = _WHITESPACE_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")


def derive_document_path(
    file_path: str,
    publish_root: str,
    slug_override: str | None = None,
) -> str:
    """Derive the published path for a vault note.

    Args:
        file_path: Vault-relative note path (e.g. ``"blog/My Post.md"``).
        publish_root: Vault folder that maps to the site root. May be
            empty, with or without a trailing slash.
        slug_override: Optional ``slug`` frontmatter value. When set it
            replaces the derived path entirely.

    Returns:
        Path starting with ``/``. Only the leaf name is slugified;
        directory segments are kept as written.
    """
    if slug_override:
        return "/" + slug_override.lstrip("/")

    root = publish_root.rstrip("/")
    relative = file_path
    if root and relative.startswith(root + "/"):
        relative = relative[len(root) + 1 :]
    elif root and relative.startswith(root):
        relative = relative[len(root) :]

    relative = relative.removesuffix(_NOTE_EXTENSION)

    *dirs, filename = relative.split("/")
    slug = slugify(filename)

    dir_path = "/".join(dirs) + "/" if dirs else ""
    return f"/{dir_path}{slug}"


def extract_rkey(uri: str) -> str:
    """Return the record key (final path segment) of an AT-URI."""
    return uri.rsplit("/", 1)[-1]


def build_document_uri(did: str, rkey: str) -> str:
    """Build the AT-URI of a document record owned by *did*."""
    return f"at://{did}/{DOCUMENT_COLLECTION}/{rkey}"


def note_title_from_path(file_path: str) -> str:
    """Base filename of a note without its ``.md`` extension."""
    return file_path.removesuffix(_NOTE_EXTENSION).rsplit("/", 1)[-1]
