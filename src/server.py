"""Protean Engine runner for the marketplace domain.

Starts the Engine worker that processes events asynchronously in
production (notification handlers):
- OutboxProcessor: polls the outbox table and publishes events to the broker
- StreamSubscriptions: reads the broker and invokes event handlers

Usage:
    python src/server.py
    python src/server.py --test-mode   # drain pending messages, then exit
"""

import argparse
import asyncio

from protean.server.engine import Engine

from marketplace.utils.logging import configure_logging


def build_engine(test_mode=False):
    from marketplace.domain import marketplace

    marketplace.init()
    return Engine(marketplace, test_mode=test_mode)


async def run(test_mode=False):
    engine = build_engine(test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Marketplace Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process currently pending messages and exit",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
