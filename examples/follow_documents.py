#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from laakhay.ffetch import ffetch


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Follow index records to their HTML documents")
    p.add_argument("url", help="Index URL, e.g. https://example.com/query-index.json")
    p.add_argument("limit", nargs="?", type=int, default=10)
    p.add_argument("--field", default="path", help="Field holding the document URL or path")
    p.add_argument("--concurrency", type=int, default=5)
    p.add_argument("--allow", action="append", default=[], help="Extra host to follow into")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args()


def title_of(entry: dict) -> str:
    document = entry["document"]
    if document is None:
        return f"<error: {entry['document_error']}>"
    if document.title is None or document.title.string is None:
        return "<untitled>"
    return document.title.string.strip()


async def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")

    index = (
        ffetch(args.url)
        .max_concurrency(args.concurrency)
        .allow(args.allow)
        .follow(args.field, "document")
        .limit(args.limit)
    )

    async with index:
        print("=" * 65)
        async for entry in index.map(lambda e: (e.get(args.field), title_of(e))):
            source, title = entry
            print(f"{str(source):40} | {title}")
        print("=" * 65)


if __name__ == "__main__":
    asyncio.run(main())
