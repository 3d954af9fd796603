# ddb_metrics.py
"""
Per-hour DynamoDB capacity metrics from CloudWatch, and table discovery.

- One GetMetricStatistics call per metric, 1h period over [day 00:00 UTC, +24h)
- Provisioned series → Average (a setting, sampled), consumed series → Sum (a counter)
- Buckets from the two series are joined on timestamp; a missing side counts as 0

IAM needed: cloudwatch:GetMetricStatistics, dynamodb:ListTables
"""

import datetime as dt
from dataclasses import dataclass
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ddb_config import (
    METRIC_CONSUMED_READ,
    METRIC_CONSUMED_WRITE,
    METRIC_NAMESPACE,
    METRIC_PROVISIONED_READ,
    METRIC_PROVISIONED_WRITE,
    PERIOD_SECONDS,
    SAMPLE_HOURS,
    STATISTICS,
    log,
)
from ddb_costs import DataSourceError, HourlyUsage, InputError

@dataclass
class Datapoint:
    timestamp: Optional[dt.datetime]
    average: float = 0.0
    total: float = 0.0  # CloudWatch "Sum"

def get_clients(region: str):
    log(f"[get_clients] region={region}")
    try:
        return boto3.client("dynamodb", region_name=region), boto3.client("cloudwatch", region_name=region)
    except BotoCoreError as e:
        raise InputError(f"invalid region {region!r}: {e}") from e

# =========================
# Table discovery
# =========================
def list_tables(dynamodb) -> List[str]:
    names: List[str] = []
    try:
        for page in dynamodb.get_paginator("list_tables").paginate():
            names.extend(page.get("TableNames", []) or [])
    except (BotoCoreError, ClientError) as e:
        raise DataSourceError(f"unable to list tables: {e}") from e
    log(f"[list_tables] found={len(names)}")
    return names

# =========================
# Metrics
# =========================
class MetricsSource:
    def __init__(self, cloudwatch):
        self.cw = cloudwatch

    def get_datapoints(self, table_name: str, metric: str, day: dt.datetime) -> List[Datapoint]:
        start = day
        end = day + dt.timedelta(hours=SAMPLE_HOURS)
        log(f"[get_datapoints] table={table_name} metric={metric} start={start.isoformat()}")
        try:
            resp = self.cw.get_metric_statistics(
                Namespace=METRIC_NAMESPACE,
                MetricName=metric,
                Dimensions=[{"Name": "TableName", "Value": table_name}],
                StartTime=start,
                EndTime=end,
                Period=PERIOD_SECONDS,
                Statistics=STATISTICS,
            )
        except (BotoCoreError, ClientError) as e:
            raise DataSourceError(f"unable to fetch {metric} for {table_name}: {e}") from e

        points = [Datapoint(p.get("Timestamp"), p.get("Average") or 0.0, p.get("Sum") or 0.0)
                  for p in resp.get("Datapoints", []) or []]
        # CloudWatch does not order datapoints
        points.sort(key=lambda p: p.timestamp or start)
        return points

    def usage(self, table_name: str, day: dt.datetime,
              provisioned_metric: str, consumed_metric: str) -> List[HourlyUsage]:
        provisioned = self.get_datapoints(table_name, provisioned_metric, day)
        consumed = self.get_datapoints(table_name, consumed_metric, day)
        return merge_hours(provisioned, consumed)

    def read_usage(self, table_name: str, day: dt.datetime) -> List[HourlyUsage]:
        return self.usage(table_name, day, METRIC_PROVISIONED_READ, METRIC_CONSUMED_READ)

    def write_usage(self, table_name: str, day: dt.datetime) -> List[HourlyUsage]:
        return self.usage(table_name, day, METRIC_PROVISIONED_WRITE, METRIC_CONSUMED_WRITE)

def merge_hours(provisioned: List[Datapoint], consumed: List[Datapoint]) -> List[HourlyUsage]:
    # points without a timestamp fall back to positional pairing
    if any(p.timestamp is None for p in provisioned + consumed):
        n = max(len(provisioned), len(consumed))
        return [HourlyUsage(
            provisioned_units=provisioned[i].average if i < len(provisioned) else 0.0,
            consumed_units=consumed[i].total if i < len(consumed) else 0.0,
        ) for i in range(n)]

    hours: Dict[dt.datetime, Dict[str, float]] = {}
    for p in provisioned:
        hours.setdefault(p.timestamp, {})["provisioned"] = p.average
    for c in consumed:
        hours.setdefault(c.timestamp, {})["consumed"] = c.total
    return [HourlyUsage(provisioned_units=v.get("provisioned", 0.0), consumed_units=v.get("consumed", 0.0), timestamp=ts)
            for ts, v in sorted(hours.items(), key=lambda x: x[0])]
