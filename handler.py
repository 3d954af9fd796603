# lambda_function.py
"""
DynamoDB Provisioned vs On-Demand cost comparison – Lambda
- Event: {"table": "<name>"} or {"all_tables": true}
  optional: "region" (default eu-west-2), "day" ("YYYY-MM-DD", default yesterday UTC),
            "location" (Pricing API location override), "debug" (bool)
- Same calculation as the command line; output is JSON with daily and monthly figures.

IAM needed: pricing:GetProducts, cloudwatch:GetMetricStatistics, dynamodb:ListTables
"""

import json

import ddb_config
from ddb_config import REGION, RunConfig, parse_day
from ddb_costs import CostComparisonError, InputError
from ddb_metrics import MetricsSource, get_clients
from ddb_pricing import fetch_catalog
from compare_billing import estimate_all_tables, get_table_costs

def parse_event(event) -> RunConfig:
    if not isinstance(event, dict):
        raise InputError("event must be a JSON object")
    cfg = RunConfig(
        region=event.get("region") or REGION,
        day=parse_day(event.get("day")),
        table=event.get("table"),
        all_tables=bool(event.get("all_tables")),
        location=event.get("location"),
    )
    if not cfg.all_tables and not cfg.table:
        raise InputError("event must include \"table\" or \"all_tables\": true")
    return cfg

def lambda_handler(event, context, clients=None, pricing_source=None):
    try:
        if isinstance(event, dict):
            ddb_config.set_debug(event.get("debug", False))
        cfg = parse_event(event)

        prices = fetch_catalog(cfg.region, cfg.location, pricing_source)
        dynamodb, cw = clients or get_clients(cfg.region)
        metrics = MetricsSource(cw)

        body = {
            "region": cfg.region,
            "day": cfg.day.date().isoformat(),
            "prices": {
                "location": prices.location,
                "on_demand_read_per_million": prices.on_demand_read * 1_000_000,
                "on_demand_write_per_million": prices.on_demand_write * 1_000_000,
                "read_capacity_unit_hour": prices.read_capacity_unit,
                "write_capacity_unit_hour": prices.write_capacity_unit,
            },
        }
        if cfg.all_tables:
            estimates, summary = estimate_all_tables(dynamodb, metrics, cfg.day, prices)
            body["tables"] = [e.to_dict() for e in estimates]
            body["summary"] = summary.to_dict()
        else:
            body["tables"] = [get_table_costs(metrics, cfg.table, cfg.day, prices).to_dict()]

        return {"statusCode": 200, "body": json.dumps(body, default=str)}
    except InputError as e:
        return {"statusCode": 400, "body": json.dumps({"error": str(e)})}
    except CostComparisonError as e:
        return {"statusCode": 500, "body": json.dumps({"error": str(e)})}
    except Exception as e:
        if ddb_config.DEBUG:
            import traceback; traceback.print_exc()
        return {"statusCode": 500, "body": json.dumps({"error": str(e)})}

# For local testing:
if __name__ == "__main__":
    print(json.dumps(lambda_handler({"all_tables": True}, None), indent=2, default=str))
