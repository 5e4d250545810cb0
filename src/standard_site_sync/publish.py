"""Turn a vault note into a document record ready to create or update."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from standard_site_sync.converters import (
    WikilinkResolver,
    markdown_to_plaintext,
    transform_obsidian_markdown,
)
from standard_site_sync.paths import derive_document_path, note_title_from_path
from standard_site_sync.records import (
    BlobRef,
    DocumentInput,
    DocumentRecord,
    NoteFrontmatter,
    build_document_record,
    utc_timestamp,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishConfig:
    """Per-run publish settings.

    Attributes:
        site_uri: AT-URI of the publication the documents belong to.
        publish_root: Vault folder that maps to the site root.
    """

    site_uri: str
    publish_root: str = ""


@dataclass(frozen=True)
class PrepareResult:
    """Record plus the dispatch decision for the repository call.

    Attributes:
        record: The document record to write.
        is_update: ``True`` when the note already carries an rkey.
        rkey: Record key for ``putRecord``; ``None`` for a create.
    """

    record: DocumentRecord
    is_update: bool
    rkey: str | None = None


def prepare_note_for_publish(
    file_path: str,
    frontmatter: NoteFrontmatter,
    body: str,
    config: PublishConfig,
    resolver: WikilinkResolver,
    existing_published_at: str | None = None,
    cover_image: BlobRef | None = None,
    now: datetime | None = None,
) -> PrepareResult:
    """Build the document record for one note.

    Args:
        file_path: Vault-relative note path.
        frontmatter: Parsed frontmatter of the note.
        body: Note text with the frontmatter block removed.
        config: Publication URI and publish root.
        resolver: Wikilink lookup used by the transformer.
        existing_published_at: ``publishedAt`` of the record being
            updated, so the original publish time never drifts.
        cover_image: Already-uploaded cover image, if any.
        now: Clock override for the new timestamps.

    Returns:
        PrepareResult with the record and create/update decision.
    """
    title = frontmatter.title or note_title_from_path(file_path) or "Untitled"
    path = derive_document_path(
        file_path, config.publish_root, frontmatter.slug
    )

    transformed = transform_obsidian_markdown(body, resolver)
    plain_text = markdown_to_plaintext(transformed.text)
    for warning in transformed.warnings:
        logger.debug("%s: %s", file_path, warning)

    timestamp = utc_timestamp(now)
    is_update = frontmatter.rkey is not None
    published_at = existing_published_at or timestamp
    updated_at = timestamp if is_update else None

    record = build_document_record(
        DocumentInput(
            site_uri=config.site_uri,
            title=title,
            path=path,
            published_at=published_at,
            updated_at=updated_at,
            markdown=transformed.text,
            plain_text=plain_text,
            description=frontmatter.description,
            tags=frontmatter.tags,
            cover_image=cover_image,
            references=transformed.references,
        )
    )

    return PrepareResult(
        record=record,
        is_update=is_update,
        rkey=frontmatter.rkey,
    )
