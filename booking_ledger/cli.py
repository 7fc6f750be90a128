"""
Operator commands for the data file and the API server.

  booking-ledger seed [--force]
  booking-ledger backup
  booking-ledger reset --yes [--reseed] [--no-backup]
  booking-ledger serve [--host HOST] [--port PORT]

Run these while the API is stopped: the API process assumes it is the only
writer of the data file.
"""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

import uvicorn

from booking_ledger.core.config import get_settings
from booking_ledger.core.exceptions import LedgerError
from booking_ledger.core.logging import get_logger, setup_logging
from booking_ledger.seed import build_seed_collections
from booking_ledger.services.registry import create_store

logger = get_logger(__name__)


async def seed(force: bool = False) -> int:
    store = create_store(get_settings())
    collections = await store.load()
    fixture = build_seed_collections()

    if force:
        to_write = fixture
    else:
        to_write = {name: items for name, items in fixture.items() if not collections.get(name)}

    if not to_write:
        logger.info("seed_skipped", reason="collections_not_empty", hint="use --force to override")
        return 0

    await store.flush(to_write)
    logger.info("seed_complete", collections=sorted(to_write), forced=force)
    return 0


async def backup() -> int:
    location = await create_store(get_settings()).backup()
    if location is None:
        logger.warning("backup_skipped", reason="no_data_file")
    return 0


async def reset(reseed: bool, make_backup: bool) -> int:
    store = create_store(get_settings())
    await store.load()
    fixture = build_seed_collections() if reseed else None
    await store.reset(reseed=fixture, backup=make_backup)
    logger.info("reset_complete", reseeded=reseed)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="booking-ledger", description=__doc__.splitlines()[1])
    commands = parser.add_subparsers(dest="command", required=True)

    seed_parser = commands.add_parser("seed", help="fill empty collections with fixture data")
    seed_parser.add_argument("--force", action="store_true", help="overwrite collections that already have data")

    commands.add_parser("backup", help="copy the data file to the backup directory")

    reset_parser = commands.add_parser("reset", help="delete all collections")
    reset_parser.add_argument("--yes", action="store_true", help="confirm the reset")
    reset_parser.add_argument("--reseed", action="store_true", help="reseed with fixture data afterwards")
    reset_parser.add_argument("--no-backup", action="store_true", help="skip the backup before deleting")

    serve_parser = commands.add_parser("serve", help="run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "serve":
        uvicorn.run("booking_ledger.main:app", host=args.host, port=args.port)
        return 0

    if args.command == "reset" and not args.yes:
        print("This deletes every collection in the data file.", file=sys.stderr)
        print("Run again with --yes to proceed.", file=sys.stderr)
        return 2

    try:
        if args.command == "seed":
            return asyncio.run(seed(force=args.force))
        if args.command == "backup":
            return asyncio.run(backup())
        return asyncio.run(reset(reseed=args.reseed, make_backup=not args.no_backup))
    except LedgerError as e:
        logger.error("command_failed", command=args.command, error=e.code, detail=e.detail)
        return 1


if __name__ == "__main__":
    sys.exit(main())
