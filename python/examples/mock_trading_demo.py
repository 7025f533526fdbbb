# -*- coding: utf-8 -*-
"""
mock_trading_demo.py

Description:
    Console demo of the mock trading engine. Starts the price tick and
    settlement timers, places a few market orders, and prints the account
    snapshot and the most recent activity feed.

Usage:
    python mock_trading_demo.py --duration 10 --orders 3

Arguments:
    --config       Path to mocktrade.yaml (default: search project root)
    --duration     Seconds to let the simulator run (default: 10)
    --orders       Number of orders to place (default: 3)
    --size         Order size (default: 1)
    --token        API token used to connect (default: none, stay offline)
    --seed         Random seed for a reproducible run
    --log-level    Log level (default: from config)

Output:
    - Prints the account snapshot and the latest feed events to console

Example:
    python mock_trading_demo.py --duration 15 --orders 5 --seed 42
    python mock_trading_demo.py --token demo-token --size 0.5
"""

import argparse
import logging
import sys
import time

from mocktrade import MarketSimulator, MockTradeError, load_config
from mocktrade.utils import level_from_name, setup_logger

logger = logging.getLogger("mocktrade.demo")


def print_snapshot(sim: MarketSimulator) -> None:
    """
    Print account snapshot and feed.

    Args:
        sim: Running simulator.
    """
    snapshot = sim.snapshot()
    print("\n" + "=" * 60)
    print(f"{snapshot.symbol}  price {snapshot.price}")
    print("=" * 60)
    print(f"Balance:        ${snapshot.balance}")
    print(f"Connected:      {snapshot.connected}  (token {snapshot.credential})")
    print(f"Pending orders: {snapshot.pending_orders}")
    print(f"Filled orders:  {snapshot.filled_orders}")
    print(f"Realized P/L:   {snapshot.realized_pnl}")

    print("\nOrders:")
    for order in sim.orders():
        pnl = order.pnl if order.pnl is not None else "-"
        print(f"  {order.order_id[:8]}  {order.side.value.upper():4}  {order.size} @ {order.entry_price}  "
              f"{order.status.value:7}  P/L {pnl}")

    print("\nFeed (newest first):")
    for event in sim.feed()[:15]:
        print(f"  {event.timestamp:%H:%M:%S}  [{event.kind.value}] {event.text}")


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description='Mock trading engine demo')
    parser.add_argument('--config', type=str, default=None, help='Path to mocktrade.yaml')
    parser.add_argument('--duration', type=float, default=10.0, help='Seconds to run')
    parser.add_argument('--orders', type=int, default=3, help='Number of orders to place')
    parser.add_argument('--size', type=str, default="1", help='Order size')
    parser.add_argument('--token', type=str, default=None, help='API token used to connect')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--log-level', type=str, default=None, help='Log level')

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Failed to load configuration: {e}", file=sys.stderr)
        return 1

    if args.seed is not None:
        config.seed = args.seed
    setup_logger(level=level_from_name(args.log_level or config.log.level), log_file=config.log.file)

    sim = MarketSimulator(config=config)
    try:
        with sim:
            if args.token:
                sim.connect(args.token)

            for i in range(args.orders):
                side = "buy" if i % 2 == 0 else "sell"
                order = sim.submit_order(side, args.size)
                logger.info(f"Placed {side} order {order.order_id} at {order.entry_price}")
                time.sleep(args.duration / max(args.orders, 1) / 2)

            time.sleep(args.duration / 2)
            sim.run_indicator()
    except MockTradeError as e:
        logger.error(f"Demo aborted: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")

    print_snapshot(sim)
    return 0


if __name__ == '__main__':
    sys.exit(main())
