#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

import httpx

from gallery.client import GalleryClientError, GallerySession, HttpGallerySource, get_client_settings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Log in, page through the gallery and optionally delete entries.",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of pages to load, including the first (default: 1).",
    )
    parser.add_argument(
        "--delete",
        action="append",
        default=[],
        metavar="ENTRY_ID",
        help="Entry id to delete after loading; repeat for a serial batch delete.",
    )
    parser.add_argument(
        "--refresh-images",
        action="store_true",
        help="Drop cached image URLs and resolve every entry again.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args()
    if args.pages <= 0:
        raise SystemExit("--pages must be greater than 0.")
    return args


def print_summary(session: GallerySession) -> None:
    state = session.state
    resolved = sum(1 for entry in state.entries if entry.display_url)
    print("Gallery state")
    print(f"- entries: {len(state.entries)}")
    print(f"- resolved images: {resolved}")
    print(f"- cursor: {state.cursor}")
    print(f"- has_more: {state.has_more}")
    if state.last_error is not None:
        print(f"- last_error: {state.last_error}")


async def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    settings = get_client_settings()

    async with httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout_seconds,
    ) as client:
        source = HttpGallerySource(client)
        session = GallerySession.from_settings(settings, client, source=source)
        try:
            await source.login(settings.username, settings.password)
        except GalleryClientError as exc:
            print(f"Login failed: {exc}")
            return 1

        try:
            await session.sync.load(force_image_refresh=args.refresh_images)
            for _ in range(args.pages - 1):
                if not await session.sync.load_more():
                    break

            if args.delete:
                wanted = set(args.delete)
                targets = [entry for entry in session.state.entries if entry.id in wanted]
                report = await session.mutations.delete_batch(targets)
                print(f"Deleted {report.succeeded}, failed {report.failed}")

            await session.sync.wait_for_resolutions()
            print_summary(session)
        finally:
            await session.aclose()

    return 0 if session.state.last_error is None else 2


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
