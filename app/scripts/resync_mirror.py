from __future__ import annotations

import argparse
import logging

from app.connections.mongo import init_mongo, close_mongo
from app.services.feedback import mirror_lag, resync_mirror
from app.utils.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Append stored feedback missing from the spreadsheet mirror.")
    parser.add_argument("--limit", type=int, default=None, help="mirror at most this many entries")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)
    init_mongo()
    try:
        before = mirror_lag()
        synced = resync_mirror(limit=args.limit)
        print(f"Unmirrored before: {before}, mirrored now: {synced}, remaining: {mirror_lag()}")
    finally:
        close_mongo()


if __name__ == "__main__":
    main()
