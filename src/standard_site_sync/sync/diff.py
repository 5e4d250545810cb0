"""Reconcile vault notes against remote document records.

Matching, per note in enumeration order:

1. **Key match** -- the note's rkey names an unconsumed record.
2. **Path fallback** -- an unconsumed record's ``path`` equals the
   note's derived path.
3. **Create** -- nothing matched.

A record is consumed by the first note that matches it, so later notes
with the same key or path fall through to the next tier. When several
records share a key or path, the first one listed is the one found.
Records left unconsumed are orphans.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from standard_site_sync.paths import extract_rkey
from standard_site_sync.records import ListedRecord
from standard_site_sync.sync.models import (
    RemoteRecord,
    SyncDiff,
    SyncUpdate,
    VaultNote,
)


def compute_sync_diff(
    vault_notes: Sequence[VaultNote],
    remote_records: Sequence[RemoteRecord],
) -> SyncDiff:
    """Classify every note as create/update and every record as matched/orphan.

    Args:
        vault_notes: Publishable notes in vault enumeration order.
        remote_records: Document records of the publication.

    Returns:
        SyncDiff whose buckets partition the inputs.
    """
    by_rkey: dict[str, RemoteRecord] = {}
    by_path: dict[str, RemoteRecord] = {}
    for record in remote_records:
        by_rkey.setdefault(record.rkey, record)
        if record.path:
            by_path.setdefault(record.path, record)

    consumed: set[str] = set()
    to_create: list[VaultNote] = []
    to_update: list[SyncUpdate] = []

    for note in vault_notes:
        match = None
        if note.rkey:
            match = by_rkey.get(note.rkey)
            if match is not None and match.uri in consumed:
                match = None

        if match is None:
            match = by_path.get(note.path)
            if match is not None and match.uri in consumed:
                match = None

        if match is None:
            to_create.append(note)
            continue

        consumed.add(match.uri)
        to_update.append(SyncUpdate(note=note, rkey=match.rkey))

    orphans = [r for r in remote_records if r.uri not in consumed]
    return SyncDiff(to_create=to_create, to_update=to_update, orphans=orphans)


def remote_records_from_listing(
    listed: Iterable[ListedRecord], site_uri: str
) -> list[RemoteRecord]:
    """Keep the documents belonging to *site_uri* as ``RemoteRecord``s."""
    records: list[RemoteRecord] = []
    for item in listed:
        if item.value.get("site") != site_uri:
            continue
        path = item.value.get("path")
        records.append(
            RemoteRecord(
                uri=item.uri,
                rkey=extract_rkey(item.uri),
                path=path if isinstance(path, str) else "",
                value=item.value,
            )
        )
    return records
