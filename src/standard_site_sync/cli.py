"""Command-line entry point for ``standard-site-sync``."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

from . import __version__
from .config import Config, load_config
from .config_loader import load_unified_config, write_starter_config
from .config_schema import UnifiedConfig, to_fallbacks
from .core.client import StandardSiteClient, XrpcError
from .logger import setup_logging
from .sync import (
    SyncEngine,
    add_publish_frontmatter,
    diff_to_json,
    format_sync_report,
    format_sync_status,
    report_to_json,
)
from .sync.models import SyncReport
from .validators import validate_note_path
from .vault import LocalVault

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    print(msg, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="standard-site-sync",
        description="Publish Obsidian-style notes as standard.site documents and pull them back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Publish two notes (they must have 'publish: true' in frontmatter)
  standard-site-sync publish blog/hello.md blog/second.md

  # Publish every note marked for publishing
  standard-site-sync sync

  # Compare the vault with the publication
  standard-site-sync status --json

  # Pull documents that have no note in the vault
  standard-site-sync pull

  # Add publishing frontmatter to a note
  standard-site-sync init blog/draft.md
        """,
    )

    parser.add_argument(
        "--vault",
        help="Vault root directory (takes precedence over STANDARD_SITE_VAULT and config files)",
    )
    parser.add_argument(
        "--handle",
        help="Account handle (takes precedence over STANDARD_SITE_HANDLE and config files)",
    )
    parser.add_argument(
        "--app-password",
        help="App password (visible in process list -- prefer STANDARD_SITE_APP_PASSWORD)",
    )
    parser.add_argument(
        "--pds-url",
        help="PDS base URL (default: https://bsky.social)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--json", action="store_true", help="Print results as JSON"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"standard-site-sync version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    publish = sub.add_parser("publish", help="Publish or update notes")
    publish.add_argument("files", nargs="+", metavar="FILE")

    unpublish = sub.add_parser("unpublish", help="Delete a note's document")
    unpublish.add_argument("file", metavar="FILE")

    sub.add_parser("sync", help="Publish every note marked 'publish: true'")
    sub.add_parser("status", help="Compare the vault with the publication")
    sub.add_parser("pull", help="Create notes for documents missing locally")

    init = sub.add_parser("init", help="Add publishing frontmatter to a note")
    init.add_argument("file", metavar="FILE")

    sub.add_parser("init-config", help="Write a starter config file")

    return parser


def _load_runtime_config(
    args: argparse.Namespace, file_config: UnifiedConfig
) -> Config:
    """Resolve configuration: CLI > env (.env loaded) > YAML > defaults."""
    return load_config(
        handle=args.handle,
        app_password=args.app_password,
        pds_url=args.pds_url,
        vault=args.vault,
        debug=args.debug,
        yaml_fallbacks=to_fallbacks(file_config),
    )


def _check_note_paths(paths: list[str]) -> None:
    for path in paths:
        ok, msg = validate_note_path(path)
        if not ok:
            raise ValueError(msg)


def _emit(payload: dict, text: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2))
    else:
        print(text)


def _emit_report(report: SyncReport, as_json: bool) -> int:
    _emit(report_to_json(report), format_sync_report(report), as_json)
    return 1 if report.errors else 0


def main(argv: list[str] | None = None) -> int:
    """Run one command and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    load_dotenv()

    if args.command == "init-config":
        setup_logging(mode="cli", debug=args.debug, log_file=args.log_file)
        print(write_starter_config())
        return 0

    try:
        file_config = load_unified_config()
    except ValueError as e:
        _stderr_print(f"ERROR: Configuration error: {e}")
        return 1

    setup_logging(
        mode="cli",
        debug=args.debug,
        log_file=args.log_file or file_config.logging.file,
        level=file_config.logging.level,
    )

    if args.command == "init":
        # Frontmatter scaffolding needs the vault only, not an account
        vault = LocalVault(
            Path(
                args.vault
                or os.getenv("STANDARD_SITE_VAULT")
                or file_config.vault.path
                or "."
            )
        )
        try:
            _check_note_paths([args.file])
            add_publish_frontmatter(vault, args.file)
        except (ValueError, OSError) as e:
            _stderr_print(f"ERROR: {e}")
            return 1
        print(f"Added publish frontmatter to {args.file}")
        return 0

    try:
        config = _load_runtime_config(args, file_config)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        return 1

    if config.debug and not args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    vault = LocalVault(Path(config.vault))
    client = StandardSiteClient(config)

    try:
        client.login()
        engine = SyncEngine(client, vault, config)

        if args.command == "publish":
            _check_note_paths(args.files)
            return _emit_report(engine.publish_notes(args.files), args.json)

        if args.command == "unpublish":
            _check_note_paths([args.file])
            return _emit_report(
                engine.unpublish_notes([args.file]), args.json
            )

        if args.command == "sync":
            return _emit_report(engine.sync_all(), args.json)

        if args.command == "status":
            diff = engine.sync_status()
            _emit(diff_to_json(diff), format_sync_status(diff), args.json)
            return 0

        if args.command == "pull":
            diff = engine.sync_status()
            if not args.json:
                print(format_sync_status(diff))
                print()
            return _emit_report(engine.pull_orphans(diff), args.json)
    except (
        ValueError,
        RuntimeError,
        XrpcError,
        requests.RequestException,
    ) as e:
        logger.error("%s failed: %s", args.command, e)
        _stderr_print(f"ERROR: {e}")
        return 1

    parser.error(f"unknown command {args.command!r}")
    return 2


def run() -> None:
    """Entry point that handles errors gracefully."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
