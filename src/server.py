"""Protean Engine runner for the distribution domain.

Starts the Engine that processes events asynchronously when the domain runs
with ``event_processing = "async"`` (the production overlay):
- OrderFulfillmentHandler: opens the delivery for each placed order
- DeliveryTrackingProjector: keeps the tracking view current

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


def _get_domain():
    """Import and initialize the distribution domain."""
    from distribution.domain import distribution

    distribution.init()
    return distribution


async def run():
    engine = Engine(_get_domain())
    await engine.run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
