#!/usr/bin/env python3
"""Bill and settle a synthetic rental portfolio.

Generates a portfolio, prepares one billing job per (apartment, period)
and one settlement job per tenancy, runs both batches across worker
processes and writes the results to the selected sink.

Usage:
    python scripts/run_settlements.py --addresses 20 --late-rate 25
    python scripts/run_settlements.py --workers 4 --sink json --output-dir out
    python scripts/run_settlements.py --sink kafka --bootstrap-servers kafka:9092
"""

import argparse
import sys
from collections import Counter
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tenancy_engine.batch import run_billing_batch, run_settlement_batch
from tenancy_engine.config import EngineConfig, SettlementConfig
from tenancy_engine.logging import get_logger, setup_logging
from tenancy_engine.scenarios import PortfolioScenario
from tenancy_engine.settlement import SettlementOrchestrator
from tenancy_engine.sinks import ConsoleSink, JsonFileSink, KafkaSink

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description=__doc__.split("\n")[1])
    parser.add_argument("--addresses", type=int, default=5, help="Number of addresses")
    parser.add_argument("--apartments", type=int, default=6, help="Apartments per address")
    parser.add_argument("--months", type=int, default=6, help="Months of reading history")
    parser.add_argument("--end-period", default="2024-06", help="Final period (YYYY-MM)")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="Settlement date")
    parser.add_argument("--late-rate", type=Decimal, default=None, help="Daily late fee rate")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--sink", choices=["console", "json", "kafka"], default="console")
    parser.add_argument("--output-dir", type=Path, default=None, help="JSON output directory")
    parser.add_argument("--bootstrap-servers", default=None, help="Kafka bootstrap servers")
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    return parser.parse_args()


def build_sink(
    args: argparse.Namespace, config: EngineConfig
) -> ConsoleSink | JsonFileSink | KafkaSink:
    """Create the output sink selected on the command line."""
    if args.sink == "json":
        return JsonFileSink(args.output_dir or config.output.json_output_dir, config.output.pretty_json)
    if args.sink == "kafka":
        if args.bootstrap_servers:
            config.kafka.bootstrap_servers = args.bootstrap_servers
        return KafkaSink(config.kafka)
    return ConsoleSink(max_records=5)


def main() -> None:
    """Run billing and settlement for a generated portfolio."""
    args = parse_args()
    config = EngineConfig.from_env()
    setup_logging(config.log_level, args.log_format)

    if args.late_rate is not None:
        config.settlement = SettlementConfig(daily_late_rate=args.late_rate)
    settlement_config = config.require_settlement()
    workers = args.workers if args.workers is not None else config.batch.workers
    seed = args.seed if args.seed is not None else config.seed

    scenario = PortfolioScenario(
        num_addresses=args.addresses,
        apartments_per_address=args.apartments,
        months=args.months,
        end_period=args.end_period,
        seed=seed,
    )
    store = scenario.generate()
    orchestrator = SettlementOrchestrator(store, store, store, store, settlement_config)

    # All reads happen here, before the pool starts
    billable = scenario.periods()[1:]
    billing_jobs = [
        orchestrator.prepare_billing_job(
            snapshot.address_id,
            snapshot.apartment_id,
            period,
            snapshot.apartment_area,
            snapshot.total_building_area,
        )
        for snapshot in scenario.snapshots
        for period in billable
    ]
    today = args.today or date.today()
    settlement_jobs = [
        orchestrator.prepare_settlement_job(snapshot, today) for snapshot in scenario.snapshots
    ]

    calculations = run_billing_batch(billing_jobs, workers, config.batch.chunksize)
    results = run_settlement_batch(settlement_jobs, workers, config.batch.chunksize)

    sink = build_sink(args, config)
    sink.write_batch("communal-calculations", calculations)
    sink.write_batch("settlements", results)
    sink.close()

    decisions = Counter(result.decision.value for result in results)
    logger.info(
        "Settled %d tenancies: %s",
        len(results),
        ", ".join(f"{name}={count}" for name, count in sorted(decisions.items())),
    )


if __name__ == "__main__":
    main()
