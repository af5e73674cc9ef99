#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from laakhay.ffetch import ffetch


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream records from a paginated JSON index")
    p.add_argument("url", help="Index URL, e.g. https://example.com/query-index.json")
    p.add_argument("limit", nargs="?", type=int, default=20)
    p.add_argument("--chunks", type=int, default=255)
    p.add_argument("--sheet", default=None)
    p.add_argument("--field", default="path", help="Field to print for each record")
    p.add_argument("--reload", action="store_true", help="Bypass HTTP caches")
    return p.parse_args()


async def main() -> None:
    args = parse_args()

    index = ffetch(args.url).chunks(args.chunks).with_cache_reload(args.reload)
    if args.sheet:
        index = index.sheet(args.sheet)

    async with index:
        print("=" * 65)
        print(f"Index      : {index.url}")
        print(f"Chunk size : {index.context.chunk_size}")
        print(f"Sheet      : {index.context.sheet_name or '(default)'}")
        print("=" * 65)
        count = 0
        async for entry in index.limit(args.limit):
            count += 1
            print(f"{count:>5} | {entry.get(args.field)}")
        print("=" * 65)
        print(f"Records    : {count}")


if __name__ == "__main__":
    asyncio.run(main())
