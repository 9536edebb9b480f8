#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from gallery.core.config import get_settings
from gallery.db.models import GalleryEntry
from gallery.db.session import AsyncSessionLocal, async_engine
from gallery.features.gallery.repo import create_entry


@dataclass
class SeedStats:
    existing_entry_count: int
    created_entries: int


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed synthetic gallery entries for local pagination testing.",
    )
    parser.add_argument(
        "--count",
        required=True,
        type=int,
        help="Number of entries to create.",
    )
    parser.add_argument(
        "--prompt-prefix",
        default="Seed image",
        help="Prefix used for entry prompts (default: 'Seed image').",
    )
    parser.add_argument(
        "--file-id-prefix",
        default="seed-file",
        help="Prefix used for synthetic file references (default: 'seed-file').",
    )
    parser.add_argument(
        "--chat-id",
        default=None,
        help="Optional origin chat id stored with every entry.",
    )
    parser.add_argument(
        "--minutes-between-entries",
        type=int,
        default=5,
        help="Gap between entries for timestamp staggering (default: 5).",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=100,
        help="Commit every N entries (default: 100).",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Execute seeding without interactive confirmation.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print what would be created.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Allow running against non-dev environments.",
    )
    args = parser.parse_args()

    if args.count <= 0:
        raise SystemExit("--count must be greater than 0.")
    if args.minutes_between_entries < 0:
        raise SystemExit("--minutes-between-entries must be 0 or greater.")
    if args.batch_size <= 0:
        raise SystemExit("--batch-size must be greater than 0.")
    return args


def ensure_dev_target(*, force: bool) -> None:
    settings = get_settings()
    environment = settings.environment.lower()
    db_name = settings.db_name.lower()

    looks_like_dev = environment in {"development", "dev", "local"} or "dev" in db_name
    if looks_like_dev or force:
        return

    raise SystemExit(
        "Refusing to run outside a dev-like database target. "
        "Set ENVIRONMENT=development / DB_NAME containing 'dev', or pass --force."
    )


async def get_existing_entry_count() -> int:
    async with AsyncSessionLocal() as session:
        return int(await session.scalar(select(func.count(GalleryEntry.id))) or 0)


async def seed_entries(args: argparse.Namespace) -> SeedStats:
    now = datetime.now(timezone.utc)
    existing_count = await get_existing_entry_count()

    created = 0
    async with AsyncSessionLocal() as session:
        # Oldest first, so identity ids and timestamps grow together.
        for offset in reversed(range(args.count)):
            sequence = existing_count + created + 1
            await create_entry(
                session,
                prompt=f"{args.prompt_prefix} {sequence}",
                metadata={"seed": True, "sequence": sequence},
                chat_id=args.chat_id,
                file_id=f"{args.file_id_prefix}-{sequence}",
                timestamp=now - timedelta(minutes=offset * args.minutes_between_entries),
                commit=False,
            )
            created += 1
            if created % args.batch_size == 0:
                await session.commit()

        if created % args.batch_size != 0:
            await session.commit()

    return SeedStats(existing_entry_count=existing_count, created_entries=created)


def print_plan(args: argparse.Namespace, *, existing_count: int) -> None:
    print("Seed plan")
    print(f"- existing_entries: {existing_count}")
    print(f"- entries_to_create: {args.count}")
    print(f"- prompt_prefix: {args.prompt_prefix}")
    print(f"- file_id_prefix: {args.file_id_prefix}")
    print(f"- minutes_between_entries: {args.minutes_between_entries}")
    print(f"- batch_size: {args.batch_size}")


async def main() -> int:
    args = parse_args()
    ensure_dev_target(force=args.force)

    existing_count = await get_existing_entry_count()
    print_plan(args, existing_count=existing_count)

    if args.dry_run:
        print("Dry run complete. No data was created.")
        return 0

    if not args.yes:
        print("Aborted: pass --yes to execute seeding (or --dry-run to preview).")
        return 1

    stats = await seed_entries(args)
    print("Seed complete")
    print(f"- created entries: {stats.created_entries}")
    print(f"- total entries: {stats.existing_entry_count + stats.created_entries}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    finally:
        asyncio.run(async_engine.dispose())
