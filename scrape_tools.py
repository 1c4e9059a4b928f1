#!/usr/bin/env python3
"""Command-line access to the scraping helpers.

Usage:
  python scrape_tools.py slug "Joe's Pizza & Grill"
  python scrape_tools.py deslug joes-pizza-and-grill
  python scrape_tools.py coords 40.7128 -74.0060 --radius 500
  python scrape_tools.py extract-id "https://example.com/places/abc123/reviews" places
  python scrape_tools.py yaml record.json --indent 4
  python scrape_tools.py download-image https://example.com/a image_dir/a
  python scrape_tools.py timestamp --utc
"""

import json
import sys

from config import YAML_INDENT, ensure_root_path
ensure_root_path()

from utils.logging_config import configure_logging, get_logger
configure_logging()

import argparse

_log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scraping helpers: slugs, coordinates, ids, YAML, images.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("slug", help="URL slug for a name.")
    p.add_argument("name")

    p = sub.add_parser("deslug", help="Words from a slug.")
    p.add_argument("slug")

    p = sub.add_parser("coords", help="Six surrounding search centres (hexagonal packing).")
    p.add_argument("latitude", type=float)
    p.add_argument("longitude", type=float)
    p.add_argument("--radius", type=float, required=True, help="Search radius in metres.")

    p = sub.add_parser("extract-id", help="Id segment after '<kind>/' in a URL.")
    p.add_argument("url")
    p.add_argument("kind", choices=["reviews", "photos", "places"])

    p = sub.add_parser("yaml", help="Render a JSON file as indented YAML.")
    p.add_argument("path", help="JSON file, or - for stdin.")
    p.add_argument("--indent", type=int, default=YAML_INDENT, help="Spaces prefixed to every line.")

    p = sub.add_parser("download-image", help="Download an image; extension from content-type.")
    p.add_argument("url")
    p.add_argument("file_path", help="Destination path without extension.")

    p = sub.add_parser("timestamp", help="Current timestamp.")
    p.add_argument("--utc", action="store_true", help="UTC instead of local time.")
    return parser


def run(args: argparse.Namespace) -> object:
    """Execute one subcommand and return what to print."""
    if args.command == "slug":
        from utils.text import slugify
        return slugify(args.name)
    if args.command == "deslug":
        from utils.text import deslugify
        return deslugify(args.slug)
    if args.command == "coords":
        from utils.geo import calc_surrounding_coords
        return calc_surrounding_coords(args.latitude, args.longitude, args.radius)
    if args.command == "extract-id":
        from utils.records import extract_id
        return extract_id(args.url, args.kind)
    if args.command == "yaml":
        from utils.yaml_format import obj_to_yaml
        if args.path == "-":
            obj = json.load(sys.stdin)
        else:
            with open(args.path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        return obj_to_yaml(obj, args.indent)
    if args.command == "download-image":
        from utils.media import download_image
        return download_image(args.url, args.file_path)
    if args.command == "timestamp":
        from utils.timeutil import get_timestamp, timestamp
        return timestamp() if args.utc else get_timestamp()
    raise ValueError(f"unknown command: {args.command}")


def main() -> None:
    args = build_parser().parse_args()
    try:
        out = run(args)
    except Exception as e:
        _log.exception("command_error", extra={"command": args.command, "error": str(e)})
        sys.exit(1)
    if out is None:
        sys.exit(1)
    if isinstance(out, str):
        print(out)
    else:
        print(json.dumps(out, indent=2))


if __name__ == "__main__":
    main()
