# ddb_pricing.py
"""
DynamoDB unit prices from the AWS Pricing API.

IAM needed: pricing:GetProducts
"""

import json
from typing import List, Optional, Union

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError

from ddb_config import (
    GROUP_ON_DEMAND_READ,
    GROUP_ON_DEMAND_WRITE,
    GROUP_PROVISIONED_READ,
    GROUP_PROVISIONED_WRITE,
    PRICING_REGION,
    SERVICE_CODE,
    log,
)
from ddb_costs import DataSourceError, InputError, PriceCatalog, PricingAmbiguityError

# =========================
# Region → display location
# =========================
def region_location(region: str) -> str:
    """Human-readable description of a region id, e.g. "Europe (London)"."""
    endpoints = botocore.session.get_session().get_data("endpoints")
    for partition in endpoints.get("partitions", []):
        info = partition.get("regions", {}).get(region)
        if info and info.get("description"):
            return info["description"]
    raise InputError(f"unknown region {region!r}")

# =========================
# Product parsing
# =========================
def parse_product(product: Union[str, dict]) -> float:
    """First strictly positive on-demand USD price of one price-list entry."""
    try:
        data = json.loads(product) if isinstance(product, str) else product
    except ValueError as e:
        raise DataSourceError(f"failed to decode price list entry: {e}") from e
    if not isinstance(data, dict):
        raise DataSourceError(f"unexpected price list entry of type {type(data).__name__}")
    on_demand = (data.get("terms") or {}).get("OnDemand") or {}
    if len(on_demand) > 1:
        raise PricingAmbiguityError(f"more than one product term found ({len(on_demand)})")

    for term in on_demand.values():
        for dim in (term.get("priceDimensions") or {}).values():
            raw = (dim.get("pricePerUnit") or {}).get("USD")
            try:
                price = float(raw)
            except (TypeError, ValueError) as e:
                raise DataSourceError(f"failed to parse on-demand pricing: {raw!r}") from e
            # first non-zero ignores free-tier entries
            if price > 0.0:
                return price

    raise PricingAmbiguityError("no product data found")

# =========================
# Pricing source
# =========================
def price_filters(group_description: str, location: Optional[str] = None,
                  region: Optional[str] = None) -> List[dict]:
    # an explicit Pricing API location wins; otherwise match on regionCode
    if location:
        where = {"Type": "TERM_MATCH", "Field": "location", "Value": location}
    elif region:
        where = {"Type": "TERM_MATCH", "Field": "regionCode", "Value": region}
    else:
        raise InputError("a region or a location is required to look up prices")
    return [where, {"Type": "TERM_MATCH", "Field": "groupDescription", "Value": group_description}]

class PricingSource:
    def __init__(self, client=None):
        self.client = client or boto3.client("pricing", region_name=PRICING_REGION)

    def get_price(self, group_description: str, location: Optional[str] = None,
                  region: Optional[str] = None) -> float:
        where = location or region
        log(f"[get_price] where={where} group={group_description}")
        filters = price_filters(group_description, location, region)
        try:
            resp = self.client.get_products(ServiceCode=SERVICE_CODE, Filters=filters)
        except (BotoCoreError, ClientError) as e:
            raise DataSourceError(f"failed to fetch pricing for {group_description!r} in {where}: {e}") from e

        price_list = resp.get("PriceList") or []
        if not price_list:
            raise PricingAmbiguityError(f"no product data found for {group_description!r} in {where}")
        try:
            return parse_product(price_list[0])
        except PricingAmbiguityError as e:
            raise PricingAmbiguityError(f"{group_description!r} in {where}: {e}") from e

    def get_catalog(self, location: Optional[str] = None, region: Optional[str] = None) -> PriceCatalog:
        def price(group):
            return self.get_price(group, location=location, region=region)

        catalog = PriceCatalog(
            location=location or region_location(region),
            read_capacity_unit=price(GROUP_PROVISIONED_READ),
            write_capacity_unit=price(GROUP_PROVISIONED_WRITE),
            on_demand_read=price(GROUP_ON_DEMAND_READ),
            on_demand_write=price(GROUP_ON_DEMAND_WRITE),
        )
        log(f"[get_catalog] {catalog}")
        return catalog

def fetch_catalog(region: str, location: Optional[str] = None, source: Optional[PricingSource] = None) -> PriceCatalog:
    """Prices by regionCode, or by Pricing API location label when one is given."""
    source = source or PricingSource()
    if location:
        return source.get_catalog(location=location)
    return source.get_catalog(region=region)
