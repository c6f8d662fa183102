"""Command line interface for the affiliate link resolver."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections import Counter
from pathlib import Path
from typing import List, Optional

import httpx

from affiliate_resolver.config import Config, load_config
from affiliate_resolver.errors import ResolutionError
from affiliate_resolver.logging_utils import configure_logging, get_logger
from affiliate_resolver.resolver import AffiliateResolver
from affiliate_resolver.storage import ResultRow, read_input_urls, write_output_csv, write_summary_json
from affiliate_resolver.url_tools import Platform

logger = get_logger(__name__)

# Only resolve links you are allowed to visit; every hop is a real request to the target site.


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Affiliate link resolver CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve one or more links and print JSON")
    resolve.add_argument("urls", nargs="+", help="Links to resolve")
    resolve.add_argument("--timeout", type=float, help="Per-hop timeout in seconds")
    resolve.add_argument("--verbose", action="store_true", help="Log every hop")

    batch = subparsers.add_parser("batch", help="Resolve every link of a CSV file")
    batch.add_argument("--input", required=True, help="Input CSV with a url column")
    batch.add_argument("--output", required=True, help="Output CSV for results")
    batch.add_argument("--url-column", default="url", help="Name of the column holding links")
    batch.add_argument("--concurrency", type=int, help="Max concurrent resolutions")
    batch.add_argument("--timeout", type=float, help="Per-hop timeout in seconds")
    batch.add_argument("--summary-json", type=str, help="Summary JSON output path")
    batch.add_argument("--log-file", type=str, help="Optional log file path")

    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    if getattr(args, "timeout", None):
        config.timeout = args.timeout
    if getattr(args, "concurrency", None):
        config.concurrency = args.concurrency
    if getattr(args, "summary_json", None):
        config.summary_json = Path(args.summary_json)
    return config


async def resolve_row(url: str, resolver: AffiliateResolver, summary: Counter) -> ResultRow:
    if not url:
        summary["errors"] += 1
        return ResultRow.failed(url, "missing_url")

    try:
        resolution = await resolver.resolve(url)
    except ResolutionError as exc:
        summary["errors"] += 1
        logger.warning("Failed to resolve %s: %s", url, exc)
        return ResultRow.failed(url, str(exc))

    summary["resolved"] += 1
    summary[f"platform_{resolution.platform.value}"] += 1
    return ResultRow.from_resolution(resolution)


async def resolve_command(
    args: argparse.Namespace,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    config = apply_overrides(load_config(), args)
    configure_logging(level="DEBUG" if args.verbose else "WARNING")

    resolver = AffiliateResolver(config, transport=transport)
    exit_code = 0
    for url in args.urls:
        try:
            resolution = await resolver.resolve(url)
        except ResolutionError as exc:
            print(json.dumps({"input": url, "error": str(exc)}, ensure_ascii=False))
            exit_code = 1
        else:
            print(json.dumps(resolution.to_dict(), ensure_ascii=False))
    return exit_code


async def batch_command(
    args: argparse.Namespace,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    config = apply_overrides(load_config(), args)
    configure_logging(Path(args.log_file) if args.log_file else None)

    input_path = Path(args.input)
    output_path = Path(args.output)

    urls = read_input_urls(input_path, args.url_column)
    logger.info("Loaded %s links from %s", len(urls), input_path)

    resolver = AffiliateResolver(config, transport=transport)
    semaphore = asyncio.Semaphore(config.concurrency)
    summary: Counter = Counter()

    async def worker(url: str) -> ResultRow:
        async with semaphore:
            return await resolve_row(url, resolver, summary)

    # gather keeps input order in the output file
    results: List[ResultRow] = await asyncio.gather(*(worker(url) for url in urls))

    write_output_csv(output_path, results)
    logger.info("Wrote %s rows to %s", len(results), output_path)

    summary_dict = {
        "total": len(results),
        "resolved": summary.get("resolved", 0),
        "errors": summary.get("errors", 0),
    }
    for platform in Platform:
        summary_dict[f"platform_{platform.value}"] = summary.get(f"platform_{platform.value}", 0)

    write_summary_json(config.summary_json, summary_dict)
    logger.info("Summary saved to %s", config.summary_json)


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "resolve":
        sys.exit(asyncio.run(resolve_command(args)))
    elif args.command == "batch":
        asyncio.run(batch_command(args))
    else:
        parser.error("Unknown command")


if __name__ == "__main__":
    main()
