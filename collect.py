#!/usr/bin/env python3
"""Collect scraped records (JSON lines) into a JSON store, saving on SIGINT/SIGTERM.

Records are buffered and merged into the store every --batch-size records and
at end of input. Ctrl+C or SIGTERM drains the buffer before exiting; if the
process ends with records still unsaved they are written to unsavedPlaces.json.

Usage:
  scraper | python collect.py --output places.json
  python collect.py --input places.jsonl --output places.json --key place_id
"""

import json
import sys

from config import COLLECT_BATCH_SIZE, DEFAULT_RECORD_KEY, ensure_root_path
ensure_root_path()

from utils.logging_config import configure_logging, get_logger, new_run_id, set_run_id
configure_logging()

import argparse

from lifecycle import Lifecycle
from utils.store import JsonRecordStore

_log = get_logger(__name__)


def collect(lines, store: JsonRecordStore, batch_size: int) -> int:
    """Buffer JSON records from lines into store, saving each full batch. Returns records read."""
    count = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            _log.warning("record_skipped", extra={"line_preview": line[:80], "error": str(e)})
            continue
        store.add(record)
        count += 1
        if batch_size > 0 and len(store.unsaved) >= batch_size:
            store.save()
    if store.unsaved:
        store.save()
    return count


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Collect JSON-lines records into a JSON store with graceful shutdown."
    )
    parser.add_argument("-o", "--output", required=True, help="JSON array file to merge records into.")
    parser.add_argument("-i", "--input", default=None, help="JSON-lines input file. Defaults to stdin.")
    parser.add_argument("--key", default=DEFAULT_RECORD_KEY, help="Record field used to dedupe.")
    parser.add_argument("--batch-size", type=int, default=COLLECT_BATCH_SIZE, help="Save every N records. 0 = only at end.")
    args = parser.parse_args()

    set_run_id(new_run_id())
    store = JsonRecordStore(args.output, key=args.key)

    lifecycle = Lifecycle()
    lifecycle.add(store.unsaved, store.save, pending_items=store.unsaved, name="record_store")
    lifecycle.register()

    _log.info("collect_start", extra={"output": args.output, "input": args.input or "stdin"})
    if args.input:
        with open(args.input, "r", encoding="utf-8") as f:
            count = collect(f, store, args.batch_size)
    else:
        count = collect(sys.stdin, store, args.batch_size)
    _log.info("collect_complete", extra={"records": count, "output": args.output})


if __name__ == "__main__":
    main()
