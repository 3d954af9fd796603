# compare_billing.py
"""
DynamoDB Provisioned vs On-Demand cost comparison (command line)

Replays one day of CloudWatch capacity metrics against both billing modes:
  --table NAME      estimate a single table
  --all-tables      estimate every table in the region and list the ones
                    that would be cheaper on On-Demand

Exit status: 0 on success, 1 on bad input or any AWS fetch failure.
No retries; a failure on one table aborts the run.
"""

import argparse
import datetime as dt
import sys
from typing import List, Optional, Tuple

import ddb_config
from ddb_config import RunConfig, log, parse_day
from ddb_costs import (
    CostComparisonError,
    InputError,
    PriceCatalog,
    RegionSummary,
    TableCostEstimate,
    estimate_table_cost,
    summarize_region,
)
from ddb_metrics import MetricsSource, get_clients, list_tables
from ddb_pricing import fetch_catalog

# =========================
# Flows
# =========================
def get_table_costs(metrics: MetricsSource, table: str, day: dt.datetime,
                    prices: PriceCatalog) -> TableCostEstimate:
    reads = metrics.read_usage(table, day)
    writes = metrics.write_usage(table, day)
    log(f"[get_table_costs] table={table} read_hours={len(reads)} write_hours={len(writes)}")
    return estimate_table_cost(table, reads, writes, prices)

def estimate_all_tables(dynamodb, metrics: MetricsSource, day: dt.datetime,
                        prices: PriceCatalog) -> Tuple[List[TableCostEstimate], RegionSummary]:
    estimates = [get_table_costs(metrics, t, day, prices) for t in list_tables(dynamodb)]
    return estimates, summarize_region(estimates)

def run(cfg: RunConfig, out=sys.stdout, clients=None, pricing_source=None) -> None:
    if not cfg.all_tables and not cfg.table:
        raise InputError("either --table or --all-tables is required")
    day = cfg.day or ddb_config.default_day()

    prices = fetch_catalog(cfg.region, cfg.location, pricing_source)
    out.write(prices.render())
    out.write("\n")

    dynamodb, cw = clients or get_clients(cfg.region)
    metrics = MetricsSource(cw)

    if not cfg.all_tables:
        out.write(get_table_costs(metrics, cfg.table, day, prices).render())
        return

    estimates, summary = estimate_all_tables(dynamodb, metrics, day, prices)
    for est in estimates:
        out.write(est.render())
        out.write("\n")
    out.write(summary.render())

# =========================
# Entry point
# =========================
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ddb-cost-compare",
        description="Estimate DynamoDB Provisioned vs On-Demand costs from one day of CloudWatch metrics.",
    )
    p.add_argument("--table", help="name of the table to query")
    p.add_argument("--all-tables", action="store_true",
                   help="query all tables and produce a summary of potential cost savings")
    p.add_argument("--region", default=ddb_config.REGION, help="AWS region name")
    p.add_argument("--day", help="day to base values on, YYYY-MM-DD (default: yesterday, UTC)")
    p.add_argument("--location", help="Pricing API location, e.g. 'EU (London)' (default: match prices on --region)")
    p.add_argument("--debug", action="store_true", help="print progress logs")
    return p

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors; this tool reports them as 1
        return 0 if e.code in (0, None) else 1
    ddb_config.set_debug(args.debug)

    try:
        cfg = RunConfig(region=args.region, day=parse_day(args.day), table=args.table,
                        all_tables=args.all_tables, location=args.location)
        run(cfg)
    except InputError as e:
        print(f"error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    except CostComparisonError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
