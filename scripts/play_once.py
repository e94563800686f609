"""Run one draw/reveal cycle against the configured database and ledger."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os

from luckyscratch.workflows import create_game


def _confirm_reset() -> bool:
    return input("Clear all records and start over? [y/N] ").strip().lower() == "y"


async def play(reset: bool = False) -> int:
    game = create_game()
    game.context.start()
    try:
        if reset:
            game.reset_all(_confirm_reset)

        pending = game.start_draw()
        if pending is None:
            print(f"Already played. Next draw opens at {game.context.next_reset_at():%Y-%m-%d %H:%M}.")
            return 1

        input("Press Enter to scratch the card...")
        record = game.confirm_reveal()
        if record is None:
            return 1
        print(f"{record.label}: {record.message}")
        print(f"Voucher code: {record.id}")

        await game.reconciler.drain()
        synced = game.view_history_item(record.id)
        print("Ledger sync:", "confirmed" if synced is not None and synced.synced else "not confirmed")
        return 0
    finally:
        game.close()
        game.context.stop()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="offer to clear history first")
    args = parser.parse_args()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(levelname)-5.5s [%(name)s] %(message)s",
    )
    return asyncio.run(play(reset=args.reset))


if __name__ == "__main__":
    raise SystemExit(main())
