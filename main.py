"""
Command line entry point.

    python main.py ingest events.jsonl
    python main.py scores BTCUSDT ETHUSDT SOLUSDT
    python main.py decide BTCUSDT --prices '{"BTCUSDT": 65000}' --balances '{"BTC": 0.1}'
    python main.py recover
"""

import argparse
import json
import sys

from config.logging_config import setup_logging
from config.settings import settings
from ingestion import init_ingestion_pipeline
from models.errors import EnduranceError
from scoring.opportunity import ScoreService
from trading import init_trading_environment
from trading.config.trading_config import load_trading_config


def cmd_ingest(args):
    cfg = load_trading_config(args.config)
    consumer, bus = init_ingestion_pipeline(market_data_cfg=cfg["market_data"])

    with open(args.file, "r") as f:
        for line in f:
            line = line.strip()
            if line:
                bus.publish(settings.MARKET_DATA_SUBJECT, line.encode("utf-8"))

    bus.drain()
    received = bus.messages(settings.MARKET_DATA_SUBJECT)
    print(f"Processed {len(received)} messages: "
          f"{sum(m.acked for m in received)} acked, {sum(m.nacked for m in received)} nacked")
    print(f"Dead-lettered: {len(bus.messages(bus.dlq_subject))}")
    return 0


def cmd_scores(args):
    cfg = load_trading_config(args.config)
    service = ScoreService(freshness_minutes=cfg["market_data"]["freshness_minutes"])
    for item in service.get_scores(args.symbols):
        print(f"{item.rank:>3}  {item.symbol:<12} {item.score:6.2f}")
    return 0


def cmd_decide(args):
    service, exchange, _ = init_trading_environment(args.config)
    for symbol, price in json.loads(args.prices).items():
        exchange.set_price(symbol, price)
    for asset, amount in json.loads(args.balances).items():
        exchange.deposit(asset, amount)

    results = service.run_for_symbol(args.symbol)
    for holding_id, outcome in results.items():
        label = outcome.value if hasattr(outcome, "value") else f"error: {outcome}"
        print(f"{holding_id}  {label}")
    return 0


def cmd_recover(args):
    service, _, _ = init_trading_environment(args.config)
    settlements = service.recover_accepted_orders()
    print(f"Recovered {len(settlements)} accepted orders")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="Opportunity-score rotation engine")
    parser.add_argument("--config", default=settings.TRADING_CONFIG or None,
                        help="trading config YAML (defaults built in)")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    p_ingest = sub.add_parser("ingest", help="feed JSON-lines market data events through the gate")
    p_ingest.add_argument("file")
    p_ingest.set_defaults(func=cmd_ingest)

    p_scores = sub.add_parser("scores", help="rank symbols by their latest opportunity score")
    p_scores.add_argument("symbols", nargs="+")
    p_scores.set_defaults(func=cmd_scores)

    p_decide = sub.add_parser("decide", help="evaluate open positions of a symbol (paper exchange)")
    p_decide.add_argument("symbol")
    p_decide.add_argument("--prices", default="{}", help="JSON object symbol -> price")
    p_decide.add_argument("--balances", default="{}", help="JSON object asset -> amount")
    p_decide.set_defaults(func=cmd_decide)

    p_recover = sub.add_parser("recover", help="settle orders left in accepted state")
    p_recover.set_defaults(func=cmd_recover)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return args.func(args)
    except EnduranceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
