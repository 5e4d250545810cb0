"""Sync engine that publishes vault notes and pulls remote documents.

The ``SyncEngine`` ties together the vault, the repository client, the
record builder, reconciliation and the materializer:

- ``publish_note`` / ``unpublish_note`` act on one note.
- ``sync_all`` publishes every note marked ``publish: true``.
- ``sync_status`` reconciles notes against the publication's documents.
- ``pull_orphans`` materialises unmatched documents as new notes.

Error handling is per-item: a single note or record failure is logged
and recorded in the ``SyncReport``; it never aborts the run.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from standard_site_sync.config import Config
from standard_site_sync.core.client import StandardSiteClient
from standard_site_sync.file_handler import split_frontmatter
from standard_site_sync.paths import (
    derive_document_path,
    extract_rkey,
    note_title_from_path,
)
from standard_site_sync.publish import PublishConfig, prepare_note_for_publish
from standard_site_sync.records import (
    PUBLICATION_TYPE,
    BlobRef,
    NoteFrontmatter,
)
from standard_site_sync.sync.diff import (
    compute_sync_diff,
    remote_records_from_listing,
)
from standard_site_sync.sync.materializer import (
    build_note_from_record,
    render_note,
)
from standard_site_sync.sync.models import (
    RemoteRecord,
    SyncAction,
    SyncDiff,
    SyncReport,
    SyncResult,
    VaultNote,
)
from standard_site_sync.validators import UnsafeRemotePathError
from standard_site_sync.vault import (
    LocalVault,
    VaultWikilinkResolver,
    mime_type_for,
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SyncEngine:
    """Publish and pull between one vault and one publication.

    Args:
        client: Logged-in repository client.
        vault: The local vault.
        config: Runtime configuration (publication and folder settings).
    """

    def __init__(
        self,
        client: StandardSiteClient,
        vault: LocalVault,
        config: Config,
    ) -> None:
        self.client = client
        self.vault = vault
        self.config = config
        self.publication_uri: str | None = config.publication_uri

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    def ensure_publication(self) -> str:
        """Return the publication URI, auto-selecting a sole publication.

        Raises:
            RuntimeError: If none is configured and the account does not
                have exactly one publication.
        """
        if self.publication_uri:
            return self.publication_uri

        publications = self.client.list_publications()
        if len(publications) == 1:
            self.publication_uri = publications[0].uri
            logger.info(
                "Auto-selected publication %s", self.publication_uri
            )
            return self.publication_uri

        raise RuntimeError(
            f"Found {len(publications)} publications; set "
            "STANDARD_SITE_PUBLICATION_URI or 'publication.uri' in config.yml"
        )

    def sync_publication_url(self) -> bool:
        """Push the configured site URL to the publication record.

        Returns:
            ``True`` if the record was updated.
        """
        if not self.config.publication_url or not self.publication_uri:
            return False
        rkey = extract_rkey(self.publication_uri)
        existing = self.client.get_publication(rkey)
        if existing is None:
            logger.warning(
                "Publication %s not found; URL not synced",
                self.publication_uri,
            )
            return False
        if existing.value.get("url") == self.config.publication_url:
            return False

        updated = {
            **existing.value,
            "$type": PUBLICATION_TYPE,
            "url": self.config.publication_url,
        }
        self.client.update_publication(rkey, updated)
        logger.info(
            "Updated publication URL to %s", self.config.publication_url
        )
        return True

    def _prepare_run(self) -> str:
        site_uri = self.ensure_publication()
        self.sync_publication_url()
        return site_uri

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def _upload_cover_image(self, cover_path: str) -> BlobRef | None:
        if not self.vault.exists(cover_path):
            logger.warning("Cover image not found: %s", cover_path)
            return None
        data = self.vault.read_binary(cover_path)
        return self.client.upload_blob(data, mime_type_for(cover_path))

    def _publish(self, rel_path: str, site_uri: str) -> SyncResult:
        """Create or update the record of one note and store its rkey."""
        content = self.vault.read(rel_path)
        data, body = split_frontmatter(content)
        frontmatter = NoteFrontmatter.model_validate(data)

        if not frontmatter.publish:
            return SyncResult(
                file_path=rel_path,
                action=SyncAction.SKIP,
                success=True,
                error="note does not have 'publish: true' in frontmatter",
            )

        existing_published_at = None
        if frontmatter.rkey:
            existing = self.client.get_document(frontmatter.rkey)
            if existing is not None:
                existing_published_at = existing.value.get("publishedAt")

        cover_image = None
        if frontmatter.cover_image:
            cover_image = self._upload_cover_image(frontmatter.cover_image)

        resolver = VaultWikilinkResolver(
            self.vault, self.config.publish_root, self.client.did
        )
        prepared = prepare_note_for_publish(
            file_path=rel_path,
            frontmatter=frontmatter,
            body=body,
            config=PublishConfig(
                site_uri=site_uri, publish_root=self.config.publish_root
            ),
            resolver=resolver,
            existing_published_at=existing_published_at,
            cover_image=cover_image,
        )

        if prepared.is_update and prepared.rkey:
            ref = self.client.update_document(prepared.rkey, prepared.record)
            action = SyncAction.UPDATE_REMOTE
            logger.info("Updated: %s", prepared.record.title)
        else:
            ref = self.client.create_document(prepared.record)
            action = SyncAction.CREATE_REMOTE
            logger.info("Published: %s", prepared.record.title)

        new_rkey = extract_rkey(ref.uri)

        def _set_rkey(fm: dict[str, Any]) -> None:
            fm["rkey"] = new_rkey

        self.vault.process_frontmatter(rel_path, _set_rkey)

        return SyncResult(
            file_path=rel_path,
            action=action,
            success=True,
            record_path=prepared.record.path,
            rkey=new_rkey,
        )

    def _run_each(
        self,
        operation: str,
        items: list[str],
        action: SyncAction,
        handler: Callable[[str], SyncResult],
    ) -> SyncReport:
        started_at = _now()
        results: list[SyncResult] = []
        for rel_path in items:
            try:
                results.append(handler(rel_path))
            except Exception as exc:
                logger.error("Failed to %s %s: %s", operation, rel_path, exc)
                results.append(
                    SyncResult(
                        file_path=rel_path,
                        action=action,
                        success=False,
                        error=str(exc),
                    )
                )
        return SyncReport(
            operation=operation,
            results=results,
            started_at=started_at,
            completed_at=_now(),
        )

    def publish_notes(self, rel_paths: list[str]) -> SyncReport:
        """Publish or update each of *rel_paths*."""
        site_uri = self._prepare_run()
        return self._run_each(
            "publish",
            rel_paths,
            SyncAction.CREATE_REMOTE,
            lambda rel: self._publish(rel, site_uri),
        )

    def publish_note(self, rel_path: str) -> SyncResult:
        """Publish or update a single note."""
        return self.publish_notes([rel_path]).results[0]

    def sync_all(self) -> SyncReport:
        """Publish every note whose frontmatter has ``publish: true``."""
        site_uri = self._prepare_run()
        return self._run_each(
            "sync",
            [rel for rel, _ in self._publishable_notes()],
            SyncAction.CREATE_REMOTE,
            lambda rel: self._publish(rel, site_uri),
        )

    # ------------------------------------------------------------------
    # Unpublishing
    # ------------------------------------------------------------------

    def _unpublish(self, rel_path: str) -> SyncResult:
        frontmatter = self.vault.get_note_frontmatter(rel_path)
        if not frontmatter.rkey:
            return SyncResult(
                file_path=rel_path,
                action=SyncAction.SKIP,
                success=True,
                error="note has not been published (no rkey in frontmatter)",
            )

        self.client.delete_document(frontmatter.rkey)
        self.vault.process_frontmatter(
            rel_path, lambda fm: fm.pop("rkey", None)
        )
        logger.info("Unpublished: %s", note_title_from_path(rel_path))
        return SyncResult(
            file_path=rel_path,
            action=SyncAction.DELETE_REMOTE,
            success=True,
            rkey=frontmatter.rkey,
        )

    def unpublish_notes(self, rel_paths: list[str]) -> SyncReport:
        """Delete the record of each of *rel_paths* and remove their ``rkey``."""
        return self._run_each(
            "unpublish", rel_paths, SyncAction.DELETE_REMOTE, self._unpublish
        )

    def unpublish_note(self, rel_path: str) -> SyncResult:
        """Delete a note's record and remove ``rkey`` from the note."""
        return self.unpublish_notes([rel_path]).results[0]

    # ------------------------------------------------------------------
    # Reconciliation and pull
    # ------------------------------------------------------------------

    def _publishable_notes(self) -> list[tuple[str, NoteFrontmatter]]:
        notes: list[tuple[str, NoteFrontmatter]] = []
        for rel_path in self.vault.list_markdown_files():
            try:
                frontmatter = self.vault.get_note_frontmatter(rel_path)
            except ValueError as exc:
                logger.warning("Skipping %s: %s", rel_path, exc)
                continue
            if frontmatter.publish:
                notes.append((rel_path, frontmatter))
        return notes

    def remote_records(self) -> list[RemoteRecord]:
        """Document records that belong to the publication."""
        site_uri = self.ensure_publication()
        return remote_records_from_listing(
            self.client.list_documents(), site_uri
        )

    def sync_status(self) -> SyncDiff:
        """Reconcile publishable notes against the publication's records."""
        remote = self.remote_records()
        notes = [
            VaultNote(
                file_path=rel_path,
                path=derive_document_path(
                    rel_path, self.config.publish_root, frontmatter.slug
                ),
                rkey=frontmatter.rkey,
            )
            for rel_path, frontmatter in self._publishable_notes()
        ]
        diff = compute_sync_diff(notes, remote)

        for orphan in diff.orphans:
            logger.debug("Orphan on PDS: %s (rkey: %s)", orphan.path, orphan.rkey)
        for note in diff.to_create:
            logger.debug("Untracked in vault: %s", note.file_path)
        return diff

    def _pull_root(self) -> str:
        return self.config.pull_folder or self.config.publish_root or ""

    def _pull(self, orphan: RemoteRecord) -> SyncResult:
        try:
            note = build_note_from_record(orphan.rkey, orphan.value)
        except UnsafeRemotePathError as exc:
            logger.warning("Skipping record %s: %s", orphan.rkey, exc)
            return SyncResult(
                file_path="",
                action=SyncAction.CREATE_LOCAL,
                success=False,
                record_path=orphan.path or None,
                rkey=orphan.rkey,
                error=str(exc),
            )

        pull_root = self._pull_root()
        full_path = (
            f"{pull_root}/{note.relative_path}"
            if pull_root
            else note.relative_path
        )

        if self.vault.exists(full_path):
            logger.info("Skipping pull (file exists): %s", full_path)
            return SyncResult(
                file_path=full_path,
                action=SyncAction.SKIP,
                success=True,
                record_path=orphan.path or None,
                rkey=orphan.rkey,
                error="file already exists",
            )

        folder = full_path.rpartition("/")[0]
        if folder:
            self.vault.create_folder(folder)
        self.vault.create(full_path, render_note(note))
        logger.info("Pulled %s", full_path)
        return SyncResult(
            file_path=full_path,
            action=SyncAction.CREATE_LOCAL,
            success=True,
            record_path=orphan.path or None,
            rkey=orphan.rkey,
        )

    def pull_orphans(self, diff: SyncDiff) -> SyncReport:
        """Write every orphan record of *diff* into the vault as a new note.

        Existing files are never overwritten. A record with an unsafe
        path fails on its own.
        """
        started_at = _now()
        results: list[SyncResult] = []
        for orphan in diff.orphans:
            try:
                results.append(self._pull(orphan))
            except Exception as exc:
                logger.error("Failed to pull record %s: %s", orphan.rkey, exc)
                results.append(
                    SyncResult(
                        file_path="",
                        action=SyncAction.CREATE_LOCAL,
                        success=False,
                        record_path=orphan.path or None,
                        rkey=orphan.rkey,
                        error=str(exc),
                    )
                )
        return SyncReport(
            operation="pull",
            results=results,
            started_at=started_at,
            completed_at=_now(),
        )

    # ------------------------------------------------------------------
    # Frontmatter scaffolding
    # ------------------------------------------------------------------

    def add_publish_frontmatter(self, rel_path: str) -> None:
        """Add the publishing keys a note is missing, keeping existing ones."""
        add_publish_frontmatter(self.vault, rel_path)


def add_publish_frontmatter(vault: LocalVault, rel_path: str) -> None:
    """Scaffold ``publish, title, description, tags, slug, coverImage``.

    Keys already present are left untouched. Needs no repository access.
    """
    title = note_title_from_path(rel_path)

    def _fill(fm: dict[str, Any]) -> None:
        fm.setdefault("publish", True)
        fm.setdefault("title", title)
        fm.setdefault("description", "")
        fm.setdefault("tags", [])
        fm.setdefault("slug", "")
        fm.setdefault("coverImage", "")

    vault.process_frontmatter(rel_path, _fill)
    logger.info("Added publish frontmatter to %s", rel_path)
