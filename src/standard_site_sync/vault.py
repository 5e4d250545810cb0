"""Local filesystem vault: the host side of publishing and pulling.

``LocalVault`` exposes the operations the sync engine needs from a note
editor: enumerate notes, read text, read and merge frontmatter, create
folders and create (never overwrite) files. ``VaultWikilinkResolver``
answers wikilink lookups from the same vault.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any, Callable

from standard_site_sync.converters import ResolvedWikilink
from standard_site_sync.file_handler import (
    create_file_exclusive,
    join_frontmatter,
    read_file_with_encoding,
    split_frontmatter,
    validate_vault_path,
    write_file,
)
from standard_site_sync.paths import build_document_uri, derive_document_path
from standard_site_sync.records import NoteFrontmatter

logger = logging.getLogger(__name__)

_MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "bmp": "image/bmp",
}


def mime_type_for(path: str) -> str:
    """Guess an image MIME type from a file extension."""
    ext = PurePosixPath(path).suffix.lstrip(".").lower()
    return _MIME_TYPES.get(ext, "application/octet-stream")


class LocalVault:
    """A directory of markdown notes.

    All paths taken and returned are POSIX-style and relative to *root*.

    Args:
        root: Vault root directory.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def list_markdown_files(self) -> list[str]:
        """Return every ``.md`` note, skipping hidden directories.

        Returns:
            Sorted list of vault-relative paths.
        """
        if not self.root.is_dir():
            return []

        notes: list[str] = []
        for path in self.root.rglob("*.md"):
            rel = path.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if path.is_file():
                notes.append(rel.as_posix())
        return sorted(notes)

    def find_note(self, linkpath: str) -> str | None:
        """Resolve a wikilink target to a note path.

        An exact vault path (with or without ``.md``) wins; otherwise the
        first note, in sorted order, whose filename matches.
        """
        target = linkpath.removesuffix(".md")
        notes = self.list_markdown_files()
        for note in notes:
            if note.removesuffix(".md") == target:
                return note
        name = target.rsplit("/", 1)[-1]
        for note in notes:
            if PurePosixPath(note).stem == name:
                return note
        return None

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def exists(self, rel_path: str) -> bool:
        return validate_vault_path(self.root, rel_path).exists()

    def read(self, rel_path: str) -> str:
        content, _ = read_file_with_encoding(
            validate_vault_path(self.root, rel_path)
        )
        return content

    def read_binary(self, rel_path: str) -> bytes:
        return validate_vault_path(self.root, rel_path).read_bytes()

    def get_frontmatter(self, rel_path: str) -> dict[str, Any]:
        """Parsed frontmatter of a note (empty when it has none)."""
        data, _ = split_frontmatter(self.read(rel_path))
        return data

    def get_note_frontmatter(self, rel_path: str) -> NoteFrontmatter:
        return NoteFrontmatter.model_validate(self.get_frontmatter(rel_path))

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def process_frontmatter(
        self, rel_path: str, update: Callable[[dict[str, Any]], None]
    ) -> None:
        """Apply *update* to a note's frontmatter and rewrite the note.

        *update* mutates the dict in place; keys it does not touch are
        preserved and the body is left as is.

        Raises:
            ValueError: If the existing frontmatter cannot be parsed.
        """
        path = validate_vault_path(self.root, rel_path)
        content, encoding = read_file_with_encoding(path)
        data, body = split_frontmatter(content, strict=True)
        update(data)
        write_file(path, join_frontmatter(data, body), encoding)
        logger.debug("Updated frontmatter of %s", rel_path)

    def create_folder(self, rel_path: str) -> None:
        """Create a folder and its parents; an existing folder is fine."""
        validate_vault_path(self.root, rel_path).mkdir(
            parents=True, exist_ok=True
        )

    def create(self, rel_path: str, content: str) -> None:
        """Create a new note.

        Raises:
            FileExistsError: If the note already exists.
        """
        create_file_exclusive(
            validate_vault_path(self.root, rel_path), content
        )
        logger.debug("Created %s", rel_path)


class VaultWikilinkResolver:
    """Resolve wikilinks to published notes of a vault.

    Targets that do not exist or are not marked ``publish: true`` resolve
    to ``None``. A ``uri`` is attached only when the target already has
    an rkey.

    Args:
        vault: The vault to look targets up in.
        publish_root: Vault folder that maps to the site root.
        did: Repository owner, used to build target AT-URIs.
    """

    def __init__(self, vault: LocalVault, publish_root: str, did: str):
        self.vault = vault
        self.publish_root = publish_root
        self.did = did

    def resolve(self, target: str) -> ResolvedWikilink | None:
        dest = self.vault.find_note(target)
        if dest is None:
            return None

        try:
            frontmatter = self.vault.get_note_frontmatter(dest)
        except ValueError as exc:
            logger.warning("Ignoring link target %s: %s", dest, exc)
            return None
        if not frontmatter.publish:
            return None

        path = derive_document_path(
            dest, self.publish_root, frontmatter.slug
        )
        uri = (
            build_document_uri(self.did, frontmatter.rkey)
            if frontmatter.rkey
            else None
        )
        return ResolvedWikilink(path=path, uri=uri)
