import datetime as dt
import json
from unittest.mock import MagicMock

import pytest

import ddb_config
from ddb_costs import PriceCatalog

DAY = dt.datetime(2019, 4, 1, tzinfo=dt.timezone.utc)

def price_entry(*prices, terms=1):
    """Pricing API price-list entry (JSON string, as boto3 returns it)."""
    dims = {f"SKU.TERM.DIM{i}": {"description": "x", "unit": "ReadRequestUnits",
                                 "pricePerUnit": {"USD": p}} for i, p in enumerate(prices)}
    on_demand = {f"SKU.TERM{t}": {"priceDimensions": dims} for t in range(terms)}
    return json.dumps({
        "product": {"productFamily": "Amazon DynamoDB PayPerRequest Throughput",
                    "attributes": {"location": "EU (London)"}},
        "serviceCode": "AmazonDynamoDB",
        "terms": {"OnDemand": on_demand},
    })

PRICES_BY_GROUP = {
    ddb_config.GROUP_PROVISIONED_READ: "0.0001544000",
    ddb_config.GROUP_PROVISIONED_WRITE: "0.0007720000",
    ddb_config.GROUP_ON_DEMAND_READ: "0.0000002970",
    ddb_config.GROUP_ON_DEMAND_WRITE: "0.0000014840",
}

def fake_pricing_client(prices_by_group=PRICES_BY_GROUP):
    client = MagicMock()

    def get_products(ServiceCode, Filters):
        group = next(f["Value"] for f in Filters if f["Field"] == "groupDescription")
        return {"PriceList": [price_entry("0.0000000000", prices_by_group[group])]}

    client.get_products.side_effect = get_products
    return client

def hour(h):
    return DAY + dt.timedelta(hours=h)

def fake_cloudwatch(series):
    """series: {(table, metric): [(hour, average, sum), ...]}"""
    cw = MagicMock()

    def get_metric_statistics(**kwargs):
        table = kwargs["Dimensions"][0]["Value"]
        points = series.get((table, kwargs["MetricName"]), [])
        return {"Label": kwargs["MetricName"],
                "Datapoints": [{"Timestamp": hour(h), "Average": avg, "Sum": total, "Unit": "Count"}
                               for h, avg, total in points]}

    cw.get_metric_statistics.side_effect = get_metric_statistics
    return cw

def fake_dynamodb(*pages):
    dynamodb = MagicMock()
    dynamodb.get_paginator.return_value.paginate.return_value = [{"TableNames": list(p)} for p in pages]
    return dynamodb

@pytest.fixture
def catalog():
    return PriceCatalog(
        location="EU (London)",
        on_demand_read=0.0000003,
        on_demand_write=0.0000015,
        read_capacity_unit=0.0001544,
        write_capacity_unit=0.000772,
    )

@pytest.fixture(autouse=True)
def quiet_logs():
    ddb_config.set_debug(False)
    yield
    ddb_config.set_debug(False)
