"""
Entry point for the oceandata_sync component.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .application.domain import ClobberLevel, Credentials, SourceDescriptor
from .application.exceptions import SyncError
from .infrastructure.containers import Container

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


def build_source(args: argparse.Namespace, config) -> SourceDescriptor:
    """Builds the run's source descriptor from CLI arguments and settings."""

    user = config.get("oceandata.user")
    password = config.get("oceandata.password")
    credentials = Credentials(user, password) if user or password else None

    local_root = args.local_root or config.get(
        "paths.local_file_root", "data/mirror"
    )
    clobber = args.clobber or config.get("sync.clobber", "if_changed")
    stop_on_error = args.stop_on_download_error or config.get(
        "sync.stop_on_download_error", False
    )

    return SourceDescriptor(
        search_pattern=args.search,
        data_type_filter=args.dtype,
        credentials=credentials,
        local_root=Path(local_root),
        clobber_level=ClobberLevel.parse(clobber),
        dry_run=args.dry_run,
        stop_on_download_error=bool(stop_on_error),
    )


async def run_application(args: argparse.Namespace):
    """Wires and runs the application using the DI container."""

    container = Container()
    config = container.config()
    setup_logging(level=config.get("logging.level", "INFO"))

    try:
        handler = container.handler_registry().resolve(args.handler)
        source = build_source(args, config)

        if args.local_dir_only:
            print(handler.local_directory(source))
            return

        report = await handler.sync(source)
    except SyncError as e:
        logger.error(f"An application error occurred: {e}")
        sys.exit(1)
    finally:
        await container.http_client().aclose()

    if report.failures:
        logger.warning(
            f"Sync finished with {len(report.failures)} failed files."
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mirror Oceandata files onto local storage"
    )

    parser.add_argument(
        "--handler",
        default="oceandata",
        help="Identifier of the synchronization handler to use.",
    )

    parser.add_argument(
        "--search",
        required=True,
        help="File search pattern, e.g. 'S*L3m_MO_CHL_chlor_a_9km.nc'",
    )

    parser.add_argument(
        "--dtype",
        default=None,
        help="Optional data type filter passed to the search, e.g. L3m.",
    )

    parser.add_argument(
        "--clobber",
        choices=[level.name.lower() for level in ClobberLevel],
        default=None,
        help="Overwrite policy for existing local files.",
    )

    parser.add_argument(
        "--local-root",
        default=None,
        help="Root directory of the local mirror.",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be downloaded without fetching.",
    )

    parser.add_argument(
        "--stop-on-download-error",
        action="store_true",
        help="Abort the run on the first failed download."
    )

    parser.add_argument(
        "--local-dir-only",
        action="store_true",
        help="Print the local directory the search writes into and exit."
    )

    return parser


def main():
    cli_args = build_parser().parse_args()
    asyncio.run(run_application(cli_args))


if __name__ == "__main__":
    main()
