"""
joplin-export command line.

Exports .eml files to Joplin with the same pipeline a mail client uses.

Usage:
    joplin-export export mail1.eml mail2.eml --settings joplin_export.yaml
    joplin-export ping --settings joplin_export.yaml
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config import settings
from .exceptions import ConfigurationError, JoplinAPIError
from .export_processing.joplin_client import JoplinClient
from .exporter import MailExporter
from .hosts.eml_host import EmlFileHost, LogNotifier
from .models.settings import ExportSettings
from .settings_store import YamlSettingsStore
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def run_export(paths: List[Path], settings_file: Path) -> int:
    store = YamlSettingsStore(settings_file)
    host = EmlFileHost(paths)
    exporter = MailExporter(host, store, LogNotifier())
    summary = await exporter.handle_menu_button(None)
    print(summary.message)
    return 0 if summary.success else 1


async def run_ping(settings_file: Path) -> int:
    export_settings = await ExportSettings.load(YamlSettingsStore(settings_file))
    async with JoplinClient(
        export_settings.base_url,
        export_settings.token,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    ) as client:
        try:
            answer = await client.ping()
        except JoplinAPIError as e:
            print(f"Joplin is not reachable at {export_settings.base_url}: {e}")
            return 1
    print(answer)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="joplin-export", description="Export emails to Joplin"
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=Path(settings.SETTINGS_FILE or "joplin_export.yaml"),
        help="YAML file with the export options",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    export_parser = subparsers.add_parser("export", help="Export .eml files as notes")
    export_parser.add_argument("files", nargs="+", type=Path, help=".eml files to export")
    subparsers.add_parser("ping", help="Check that the Joplin Web Clipper is reachable")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(
        service_name="joplin-export",
        log_level="DEBUG" if args.verbose else settings.LOG_LEVEL,
        enable_json=settings.LOG_JSON,
    )

    try:
        if args.command == "export":
            return asyncio.run(run_export(args.files, args.settings))
        return asyncio.run(run_ping(args.settings))
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Cannot read mail file: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
