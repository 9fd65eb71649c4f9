from __future__ import annotations

import argparse
import logging
from datetime import datetime, timedelta

from dotenv import load_dotenv

from .config import Settings, load_settings
from .exceptions import SyncError
from .http_client import HttpConfig, auth_header_for
from .logging_utils import configure_logging, get_logger, log_json
from .paginator import IncrementalPaginator
from .sinks import LoggingRecordSink
from .store import InMemoryBookmarkStore
from .sync import synchronize
from .utils import as_iso, now_utc, parse_utc


def bookmark_arg(value: str) -> datetime:
    try:
        return parse_utc(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value!r}")


def _int_arg(value: str, minimum: int) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if n < minimum:
        raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {n}")
    return n


def positive_int(value: str) -> int:
    return _int_arg(value, 1)


def non_negative_int(value: str) -> int:
    return _int_arg(value, 0)


def build_paginator(settings: Settings, page_size: int | None = None) -> IncrementalPaginator:
    cfg = HttpConfig(
        timeout_sec=settings.timeout_sec,
        auth_header_builder=auth_header_for(settings.auth_scheme, settings.username, settings.password),
    )
    top = page_size if page_size is not None else settings.page_size
    return IncrementalPaginator(settings.base_url, cfg, top=top)


def starting_bookmark(settings: Settings, since: datetime | None, full: bool) -> datetime | None:
    if full:
        return None
    if since is not None:
        return since
    return now_utc() - timedelta(days=settings.lookback_days)


def cmd_sync(settings: Settings, args: argparse.Namespace) -> int:
    logger = get_logger()
    store = InMemoryBookmarkStore(starting_bookmark(settings, args.since, args.full))
    paginator = build_paginator(settings, args.page_size)

    try:
        result = synchronize(paginator, store, LoggingRecordSink(preview=args.preview))
    except SyncError as e:
        log_json(logger, logging.ERROR, "cli_sync_failed", kind=e.kind, error=str(e))
        print(f"FAILED ({e.kind}): {e}")
        return 1

    print("OK")
    print(f"records: {len(result.records)}")
    print(f"pages: {result.stats.pages}")
    print(f"new_bookmark: {as_iso(result.new_bookmark) or 'unchanged'}")
    return 0


def main(argv=None) -> int:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(settings.log_level)

    parser = argparse.ArgumentParser(prog="ams_sync")
    sub = parser.add_subparsers(dest="cmd", required=True)

    syncp = sub.add_parser("sync", help="Fetch Organizations updated since a bookmark")
    when = syncp.add_mutually_exclusive_group()
    when.add_argument("--since", type=bookmark_arg, default=None, help="ISO-8601 bookmark (UTC if no offset)")
    when.add_argument("--full", action="store_true", help="No bookmark: fetch everything")
    syncp.add_argument("--page-size", type=positive_int, default=None)
    syncp.add_argument("--preview", type=non_negative_int, default=5, help="How many records to log")

    args = parser.parse_args(argv)

    if args.cmd == "sync":
        return cmd_sync(settings, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
