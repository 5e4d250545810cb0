"""Vault to standard.site document sync.

Modules:

- ``models``       -- ``VaultNote``, ``RemoteRecord``, ``SyncDiff``,
  ``SyncAction``, ``SyncResult``, ``SyncReport``: data contracts.
- ``diff``         -- ``compute_sync_diff``: reconcile notes against records.
- ``materializer`` -- ``build_note_from_record``: remote record to note text.
- ``engine``       -- ``SyncEngine``: publish, unpublish, status and pull.
- ``reporter``     -- Human-readable and JSON report formatting.

Usage example
-------------
::

    from pathlib import Path
    from standard_site_sync.core.client import StandardSiteClient
    from standard_site_sync.sync import (
        SyncEngine, format_sync_report, format_sync_status,
    )
    from standard_site_sync.vault import LocalVault

    client = StandardSiteClient(config)
    client.login()
    engine = SyncEngine(client, LocalVault(Path(config.vault)), config)

    diff = engine.sync_status()
    print(format_sync_status(diff))
    print(format_sync_report(engine.pull_orphans(diff)))
"""

from .diff import compute_sync_diff, remote_records_from_listing
from .engine import SyncEngine, add_publish_frontmatter
from .materializer import (
    PulledNote,
    build_note_from_record,
    escape_yaml_scalar,
    format_yaml_array,
    render_note,
)
from .models import (
    RemoteRecord,
    SyncAction,
    SyncDiff,
    SyncReport,
    SyncResult,
    SyncUpdate,
    VaultNote,
)
from .reporter import (
    diff_to_json,
    format_sync_report,
    format_sync_status,
    report_to_json,
)

__all__ = [
    "PulledNote",
    "RemoteRecord",
    "SyncAction",
    "SyncDiff",
    "SyncEngine",
    "SyncReport",
    "SyncResult",
    "SyncUpdate",
    "VaultNote",
    "add_publish_frontmatter",
    "build_note_from_record",
    "compute_sync_diff",
    "diff_to_json",
    "escape_yaml_scalar",
    "format_sync_report",
    "format_sync_status",
    "format_yaml_array",
    "remote_records_from_listing",
    "render_note",
    "report_to_json",
]
