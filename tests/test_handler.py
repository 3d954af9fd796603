import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import InvalidRegionError

from conftest import fake_cloudwatch, fake_dynamodb, fake_pricing_client, price_entry
from ddb_pricing import PricingSource
from handler import lambda_handler
from test_compare_billing import SERIES

def invoke(event, tables=("idle", "hot"), pricing_client=None):
    return lambda_handler(
        event, None,
        clients=(fake_dynamodb(list(tables)), fake_cloudwatch(SERIES)),
        pricing_source=PricingSource(pricing_client or fake_pricing_client()),
    )

def test_all_tables_summary():
    resp = invoke({"all_tables": True, "day": "2019-04-01", "location": "EU (London)"})
    assert resp["statusCode"] == 200

    body = json.loads(resp["body"])
    assert body["day"] == "2019-04-01"
    assert [t["table"] for t in body["tables"]] == ["idle", "hot"]
    assert [c["table"] for c in body["summary"]["switch_candidates"]] == ["idle"]
    summary = body["summary"]
    assert summary["total_monthly_saving"] == pytest.approx(summary["total_daily_saving"] * 365 / 12)

def test_single_table():
    resp = invoke({"table": "hot", "day": "2019-04-01", "location": "EU (London)"})
    body = json.loads(resp["body"])
    assert resp["statusCode"] == 200
    assert [t["table"] for t in body["tables"]] == ["hot"]
    assert "summary" not in body
    daily = body["tables"][0]["daily"]
    assert body["tables"][0]["monthly"]["provisioned_read"] == pytest.approx(daily["provisioned_read"] * 365 / 12)

@pytest.mark.parametrize("event", [
    {},
    {"day": "2019-04-01"},
    {"table": "hot", "day": "April 1st"},
    "not-a-dict",
])
def test_bad_input_is_400(event):
    resp = invoke(event)
    assert resp["statusCode"] == 400
    assert "error" in json.loads(resp["body"])

def test_ambiguous_pricing_is_500_and_estimates_nothing():
    pricing_client = MagicMock()
    pricing_client.get_products.return_value = {"PriceList": [price_entry("0.1", terms=2)]}
    cw = fake_cloudwatch(SERIES)
    resp = lambda_handler({"table": "hot", "day": "2019-04-01", "location": "EU (London)"}, None,
                          clients=(fake_dynamodb(["hot"]), cw),
                          pricing_source=PricingSource(pricing_client))

    assert resp["statusCode"] == 500
    body = json.loads(resp["body"])
    assert "more than one product term" in body["error"]
    assert "tables" not in body
    cw.get_metric_statistics.assert_not_called()

def test_malformed_region_is_400():
    with patch("ddb_metrics.boto3.client", side_effect=InvalidRegionError(region_name="not a region")):
        resp = lambda_handler({"table": "hot", "day": "2019-04-01", "region": "not a region",
                               "location": "EU (London)"}, None,
                              pricing_source=PricingSource(fake_pricing_client()))
    assert resp["statusCode"] == 400
    assert "invalid region" in json.loads(resp["body"])["error"]
