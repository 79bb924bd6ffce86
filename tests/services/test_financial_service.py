"""Tests for FinancialService."""

import pytest

from lens.schemas.artifacts import Currency
from lens.services.financial_service import FinancialService, normalize_currency, normalize_metrics

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_happy_path(gateway):
    model = await FinancialService(gateway).estimate("plant app", "Ideation")

    assert model.pricing_model == "Subscription"
    assert model.currency == Currency.DOLLAR
    assert model.metrics.price == 5
    assert model.metrics.cac == 12
    assert model.metrics.cogs == 0.5
    assert model.metrics.users == 1500


@pytest.mark.asyncio
async def test_empty_reply_defaults(gateway):
    gateway.set_structured("pricingModel", {})

    model = await FinancialService(gateway).estimate("plant app", "Ideation")

    assert model.currency == Currency.DOLLAR
    assert model.metrics.price == 0
    assert model.insight == ""


@pytest.mark.parametrize(("raw", "expected"), [("€", "€"), ("£", "£"), ("USD", "$"), (None, "$")])
def test_normalize_currency(raw, expected):
    assert normalize_currency(raw) == expected


def test_normalize_metrics_coerces_bad_values():
    metrics = normalize_metrics({"price": -3, "cac": "12", "cogs": True, "users": float("nan")})
    assert metrics == {"price": 0.0, "cac": 0.0, "cogs": 0.0, "users": 0.0}
