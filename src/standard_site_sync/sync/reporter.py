"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync operations:

- ``format_sync_report`` -- post-run summary of a ``SyncReport``.
- ``format_sync_status`` -- reconciliation summary of a ``SyncDiff``.
- ``report_to_json`` / ``diff_to_json`` -- structured dicts for ``--json``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyncDiff, SyncReport

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a completed run as human-readable text.

    Sections are only included when they contain at least one result.
    Skipped items are summarised by count only.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    lines.append(f"Report for '{report.operation}'")
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(report.summary())
    lines.append("")

    if report.created_remote:
        lines.append("Published:")
        for r in report.created_remote:
            lines.append(f"  {r.file_path} -> {r.record_path} ({r.rkey})")
        lines.append("")

    if report.updated_remote:
        lines.append("Updated:")
        for r in report.updated_remote:
            lines.append(f"  {r.file_path} -> {r.record_path} ({r.rkey})")
        lines.append("")

    if report.deleted_remote:
        lines.append("Unpublished:")
        for r in report.deleted_remote:
            lines.append(f"  {r.file_path} ({r.rkey})")
        lines.append("")

    if report.created_local:
        lines.append("Pulled:")
        for r in report.created_local:
            lines.append(f"  {r.record_path or r.rkey} -> {r.file_path}")
        lines.append("")

    if report.errors:
        lines.append("Errors:")
        for r in report.errors:
            lines.append(f"  {r.file_path or r.rkey}: {r.error}")
        lines.append("")

    if report.skipped:
        lines.append(f"Skipped: {len(report.skipped)}")
        for r in report.skipped:
            lines.append(f"  {r.file_path}: {r.error}")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_sync_status(diff: SyncDiff) -> str:
    """Format a reconciliation result.

    The first line reads e.g. ``Sync status: 2 untracked, 5 synced``, or
    ``Sync status: everything in sync`` when all buckets are empty.
    """
    parts: list[str] = []
    if diff.to_create:
        parts.append(f"{len(diff.to_create)} untracked")
    if diff.to_update:
        parts.append(f"{len(diff.to_update)} synced")
    if diff.orphans:
        parts.append(f"{len(diff.orphans)} orphans on PDS")

    lines = [f"Sync status: {', '.join(parts) or 'everything in sync'}"]

    if diff.to_create:
        lines.append("")
        lines.append("Untracked in vault:")
        for note in diff.to_create:
            lines.append(f"  {note.file_path} -> {note.path}")

    if diff.orphans:
        lines.append("")
        lines.append("Orphans on PDS:")
        for orphan in diff.orphans:
            lines.append(f"  {orphan.path or '(no path)'} (rkey: {orphan.rkey})")

    return "\n".join(lines)


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with run info, counts, and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "file_path": r.file_path,
            "action": r.action.value,
            "success": r.success,
        }
        if r.record_path:
            entry["record_path"] = r.record_path
        if r.rkey:
            entry["rkey"] = r.rkey
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "operation": report.operation,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "published": len(report.created_remote),
            "updated": len(report.updated_remote),
            "unpublished": len(report.deleted_remote),
            "pulled": len(report.created_local),
            "errors": len(report.errors),
            "skipped": len(report.skipped),
        },
        "results": results_list,
    }


def diff_to_json(diff: SyncDiff) -> dict:
    """Convert a reconciliation result to a structured dict."""
    return {
        "in_sync": diff.in_sync,
        "to_create": [
            {"file_path": n.file_path, "path": n.path} for n in diff.to_create
        ],
        "to_update": [
            {"file_path": u.note.file_path, "path": u.note.path, "rkey": u.rkey}
            for u in diff.to_update
        ],
        "orphans": [
            {"uri": o.uri, "rkey": o.rkey, "path": o.path}
            for o in diff.orphans
        ],
    }
