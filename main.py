"""newsrelay - niche news collection and Discord broadcast

Simple CLI for cron jobs and manual runs.
"""

import argparse
import asyncio
import sys

from newsrelay.api import deps
from newsrelay.models.errors import AlreadySent, ItemNotFound
from newsrelay.services import pipeline


async def run_collect() -> int:
    outcome = await pipeline.collect_now(deps.get_orchestrator(), deps.get_item_store())
    if outcome.found_nothing:
        print("No new items found")
        return 0

    print(f"Collected {outcome.count} items:")
    for item in outcome.items:
        print(f"  - [{item.source_query}] {item.title}")
        print(f"    {item.link}")
    return 0


async def run_latest() -> int:
    items = await pipeline.latest_session(deps.get_item_store())
    if not items:
        print("No collected items")
        return 0

    for item in items:
        mark = "sent" if item.sent else "    "
        print(f"{item.row_id:>5} {mark} {item.title}")
        print(f"           {item.link}")
    return 0


async def run_send(row_id: str) -> int:
    try:
        outcome = await pipeline.send_item(
            row_id,
            store=deps.get_item_store(),
            directory=deps.get_recipient_directory(),
            dispatcher=deps.get_dispatcher(),
        )
    except (ItemNotFound, AlreadySent) as e:
        print(f"[!] {e}")
        return 1

    print(f"Sent to {outcome.success_count}/{outcome.eligible_count} recipients: {outcome.item.title}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="newsrelay news collector")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("collect", help="Collect news now and store it")
    subparsers.add_parser("latest", help="Show the latest collection session")
    send_parser = subparsers.add_parser("send", help="Broadcast one item to recipients")
    send_parser.add_argument("--row-id", "-r", required=True, help="Row id from `latest`")

    args = parser.parse_args()

    if args.command == "collect":
        code = asyncio.run(run_collect())
    elif args.command == "latest":
        code = asyncio.run(run_latest())
    else:
        code = asyncio.run(run_send(args.row_id))
    sys.exit(code)


if __name__ == "__main__":
    main()
