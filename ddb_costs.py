# ddb_costs.py
"""
DynamoDB Provisioned vs On-Demand cost estimation (pure logic, no AWS calls)

- HourlyUsage: one CloudWatch hour bucket (average provisioned units, summed consumed units)
- PriceCatalog: four unit prices for one location; on-demand prices are per single request
- estimate_table_cost(): replays one day of usage against both billing modes
- summarize_region(): tables that would be cheaper on On-Demand, and the total saving
- Monthly figures are always daily * 365 / 12
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ddb_config import DAYS_PER_YEAR, MONTHS_PER_YEAR

# =========================
# Errors
# =========================
class CostComparisonError(Exception):
    """Base class for every failure the entry points report."""

class InputError(CostComparisonError):
    """Malformed day, missing table name, unknown region."""

class DataSourceError(CostComparisonError):
    """Listing tables, fetching metrics or fetching prices failed."""

class PricingAmbiguityError(DataSourceError):
    """Pricing data had several on-demand terms, or no usable non-zero price."""

# =========================
# Data models
# =========================
@dataclass(frozen=True)
class HourlyUsage:
    provisioned_units: float = 0.0
    consumed_units: float = 0.0
    timestamp: Optional[dt.datetime] = None

@dataclass(frozen=True)
class PriceCatalog:
    location: str
    on_demand_read: float       # USD per read request unit
    on_demand_write: float      # USD per write request unit
    read_capacity_unit: float   # USD per RCU-hour
    write_capacity_unit: float  # USD per WCU-hour

    def __post_init__(self):
        for name in ("on_demand_read", "on_demand_write", "read_capacity_unit", "write_capacity_unit"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    def render(self) -> str:
        lines = [
            f"Current prices for {self.location}:",
            "  On Demand:",
            f"    Reads:   ${self.on_demand_read * 1_000_000:.5f} (per million)",
            f"    Writes:  ${self.on_demand_write * 1_000_000:.5f} (per million)",
            "  Provisioned:",
            f"    RCUs:    ${self.read_capacity_unit:.5f}",
            f"    WCUs:    ${self.write_capacity_unit:.5f}",
        ]
        return "\n".join(lines) + "\n"

@dataclass(frozen=True)
class TableCostEstimate:
    table_name: str
    on_demand_read: float = 0.0
    on_demand_write: float = 0.0
    provisioned_read: float = 0.0
    provisioned_write: float = 0.0

    @property
    def on_demand_total(self) -> float:
        return self.on_demand_read + self.on_demand_write

    @property
    def provisioned_total(self) -> float:
        return self.provisioned_read + self.provisioned_write

    @property
    def saving(self) -> float:
        """Daily saving from switching to On-Demand (negative when Provisioned is cheaper)."""
        return self.provisioned_total - self.on_demand_total

    def render(self) -> str:
        figures = [
            ("On Demand Read", self.on_demand_read),
            ("On Demand Write", self.on_demand_write),
            ("Provisioned Read", self.provisioned_read),
            ("Provisioned Write", self.provisioned_write),
        ]
        lines = [self.table_name, "  Estimated daily:"]
        lines += [f"    {label}: ${value:.5f}" for label, value in figures]
        lines.append("  Estimated monthly:")
        lines += [f"    {label}: ${monthly(value):.5f}" for label, value in figures]
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict:
        return {
            "table": self.table_name,
            "daily": {
                "on_demand_read": self.on_demand_read,
                "on_demand_write": self.on_demand_write,
                "provisioned_read": self.provisioned_read,
                "provisioned_write": self.provisioned_write,
                "on_demand_total": self.on_demand_total,
                "provisioned_total": self.provisioned_total,
            },
            "monthly": {
                "on_demand_read": monthly(self.on_demand_read),
                "on_demand_write": monthly(self.on_demand_write),
                "provisioned_read": monthly(self.provisioned_read),
                "provisioned_write": monthly(self.provisioned_write),
                "on_demand_total": monthly(self.on_demand_total),
                "provisioned_total": monthly(self.provisioned_total),
            },
        }

@dataclass(frozen=True)
class RegionSummary:
    switch_candidates: List[Tuple[str, float]] = field(default_factory=list)
    total_daily_saving: float = 0.0

    @property
    def total_monthly_saving(self) -> float:
        return monthly(self.total_daily_saving)

    def render(self) -> str:
        lines = [f"Switch table {name} to on-demand to save ${saving:.5f} per day"
                 for name, saving in self.switch_candidates]
        lines.append("")
        lines.append(f"Total saved per day: ${self.total_daily_saving:.5f}")
        lines.append(f"Total saved per month: ${self.total_monthly_saving:.5f}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict:
        return {
            "switch_candidates": [{"table": n, "daily_saving": s, "monthly_saving": monthly(s)}
                                  for n, s in self.switch_candidates],
            "total_daily_saving": self.total_daily_saving,
            "total_monthly_saving": self.total_monthly_saving,
        }

# =========================
# Calculations
# =========================
def monthly(daily: float) -> float:
    return daily * DAYS_PER_YEAR / MONTHS_PER_YEAR

def estimate_table_cost(table_name: str, read_usage: Sequence[HourlyUsage],
                        write_usage: Sequence[HourlyUsage], prices: PriceCatalog) -> TableCostEstimate:
    reads = sum(u.consumed_units for u in read_usage)
    writes = sum(u.consumed_units for u in write_usage)

    # provisioned capacity is billed for every hour it is allocated: sum, never average
    provisioned_read = sum(u.provisioned_units * prices.read_capacity_unit for u in read_usage)
    provisioned_write = sum(u.provisioned_units * prices.write_capacity_unit for u in write_usage)

    return TableCostEstimate(
        table_name=table_name,
        on_demand_read=prices.on_demand_read * reads,
        on_demand_write=prices.on_demand_write * writes,
        provisioned_read=float(provisioned_read),
        provisioned_write=float(provisioned_write),
    )

def summarize_region(estimates: Iterable[TableCostEstimate]) -> RegionSummary:
    candidates: List[Tuple[str, float]] = []
    total = 0.0
    for est in estimates:
        saving = est.saving
        if saving > 0:
            candidates.append((est.table_name, saving))
            total += saving
    return RegionSummary(switch_candidates=candidates, total_daily_saving=total)
