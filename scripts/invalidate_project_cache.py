#!/usr/bin/env python3
"""
Invalidate cached project listing pages in Redis.

Run after a bulk import so the next listing request recomputes its page from
PostgreSQL. Mirrors the service's POST /api/projects/cache/invalidate
endpoint but talks to Redis directly, so it works while the service is down.
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from service_projects.app.caching import RedisCacheStore
from service_projects.app.domain import CACHE_KEY_PREFIX


async def invalidate(store: RedisCacheStore, *, prefix: str, dry_run: bool) -> Dict[str, Any]:
    """Delete (or, on a dry run, count) every key under the prefix and return the summary."""
    pattern = f"{prefix}*"
    if dry_run:
        matching = await store.count_pattern(pattern)
        return {"pattern": pattern, "matching": matching, "deleted": 0, "dry_run": True}

    deleted = await store.delete_pattern(pattern)
    return {"pattern": pattern, "deleted": deleted, "dry_run": False}


async def _run(args: argparse.Namespace) -> Dict[str, Any]:
    store = RedisCacheStore.from_url(args.redis_url)
    try:
        return await invalidate(store, prefix=args.prefix, dry_run=args.dry_run)
    finally:
        await store.close()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Invalidate cached project listing pages.")
    parser.add_argument("--redis-url", default=os.getenv("BOARD_REDIS_URL", "redis://localhost:6379/0"), help="Redis connection URL")
    parser.add_argument("--prefix", default=CACHE_KEY_PREFIX, help="Cache key namespace to clear")
    parser.add_argument("--dry-run", action="store_true", help="Only count matching keys; do not delete")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON summary")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        summary = asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        print(f"[cache-invalidate] failed: {exc}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("[cache-invalidate] DRY RUN - no keys deleted")

    print(json.dumps(summary, indent=2))

    if args.output:
        args.output.write_text(json.dumps(summary, indent=2))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
