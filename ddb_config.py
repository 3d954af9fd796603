# ddb_config.py
"""
Shared configuration for the DynamoDB Provisioned vs On-Demand comparison.

Module-level values are the defaults (edit as needed); anything that changes per run
is carried in RunConfig and passed explicitly to the flows.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional

# ========================
# Global Debug Toggle
# ========================
DEBUG = False  # set True (or pass --debug) to print progress logs
def log(*args, **kwargs):
    if DEBUG:
        print(*args, **kwargs)

def set_debug(enabled: bool) -> None:
    global DEBUG
    DEBUG = bool(enabled)

# =========================
# ====== CONFIG (edit) =====
# =========================
REGION = "eu-west-2"

# Pricing API is only served from us-east-1 (and ap-south-1)
PRICING_REGION = "us-east-1"
SERVICE_CODE = "AmazonDynamoDB"

# Pricing API groupDescription values for the four unit prices
GROUP_PROVISIONED_READ = "DynamoDB Provisioned Read Units"
GROUP_PROVISIONED_WRITE = "DynamoDB Provisioned Write Units"
GROUP_ON_DEMAND_READ = "DynamoDB PayPerRequest Read Request Units"
GROUP_ON_DEMAND_WRITE = "DynamoDB PayPerRequest Write Request Units"

# CloudWatch
METRIC_NAMESPACE = "AWS/DynamoDB"
METRIC_PROVISIONED_READ = "ProvisionedReadCapacityUnits"
METRIC_CONSUMED_READ = "ConsumedReadCapacityUnits"
METRIC_PROVISIONED_WRITE = "ProvisionedWriteCapacityUnits"
METRIC_CONSUMED_WRITE = "ConsumedWriteCapacityUnits"
STATISTICS = ["Average", "Maximum", "Sum", "SampleCount"]
PERIOD_SECONDS = 3600  # one bucket per hour
SAMPLE_HOURS = 24

# Daily → monthly projection
DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12

DAY_FORMAT = "%Y-%m-%d"

# =========================
# Run configuration
# =========================
@dataclass
class RunConfig:
    region: str = REGION
    day: Optional[dt.datetime] = None
    table: Optional[str] = None
    all_tables: bool = False
    location: Optional[str] = None  # overrides the region → location lookup

def default_day() -> dt.datetime:
    """Midnight UTC of yesterday, the most recent complete day."""
    today = dt.datetime.now(dt.timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return today - dt.timedelta(days=1)

def parse_day(value: Optional[str]) -> dt.datetime:
    # imported here: ddb_costs imports this module
    from ddb_costs import InputError

    if not value:
        return default_day()
    try:
        day = dt.datetime.strptime(value.strip(), DAY_FORMAT)
    except ValueError as e:
        raise InputError(f"unexpected date format {value!r}, expected YYYY-MM-DD") from e
    return day.replace(tzinfo=dt.timezone.utc)
