"""Live storefront countdown in the terminal.

Usage:
    python -m countdown.widget --api-url http://localhost:8000 --shop demo.myshopify.com
    python -m countdown.widget ... --product 123456 --ticks 10
"""

import argparse
import asyncio
import logging

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from countdown.widget.client import StorefrontClient
from countdown.widget.render import render_state
from countdown.widget.ticker import REFRESH_INTERVAL, CountdownTicker, TickState


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a shop's active countdown timers")
    parser.add_argument("--api-url", required=True, help="Base URL of the countdown API")
    parser.add_argument("--shop", required=True, help="Shop domain, e.g. demo.myshopify.com")
    parser.add_argument("--product", default=None, help="Only show timers for this product id")
    parser.add_argument(
        "--refresh", type=float, default=REFRESH_INTERVAL, help="Seconds between timer refreshes"
    )
    parser.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> None:
    console = Console()
    client = StorefrontClient(args.api_url, args.shop)
    try:
        with Live(console=console, refresh_per_second=4) as live:

            def on_tick(state: TickState) -> None:
                live.update(render_state(state))

            ticker = CountdownTicker(
                client,
                on_tick,
                product_id=args.product,
                refresh_interval=args.refresh,
            )
            await ticker.run(max_ticks=args.ticks)
    finally:
        await client.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
