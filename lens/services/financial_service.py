"""FinancialService: napkin-math unit economics.

Only the generated contract lives here. Break-even users and LTV:CAC are
view-layer heuristics and are not computed by this service.
"""

import math
from typing import Any

import structlog

from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str
from lens.gateway.protocol import Gateway
from lens.schemas.artifacts import Currency, FinancialModel
from lens.schemas.configuration import BusinessStage

logger = structlog.get_logger(__name__)

METRIC_FIELDS = ("price", "cac", "cogs", "users")

FINANCIAL_SCHEMA = s.obj(
    {
        "pricingModel": s.string("e.g. Subscription, One-time Purchase, Freemium"),
        "currency": s.string(enum=[c.value for c in Currency]),
        "metrics": s.obj(
            {
                "price": s.number("Estimated price, monthly or per unit"),
                "cac": s.number("Estimated cost to acquire a customer"),
                "cogs": s.number("Cost of goods sold / server cost per user"),
                "users": s.number("Realistic month-12 user target for a solo founder"),
            },
            required=list(METRIC_FIELDS),
        ),
        "insight": s.string("One sentence about the economics"),
    },
    required=["pricingModel", "currency", "metrics", "insight"],
)


def build_financial_prompt(topic: str, stage: BusinessStage) -> str:
    return f"""Create a "Napkin Math" financial estimation for this business idea: "{topic}" (Stage: {stage}).
Estimate realistic starting unit economics.

Provide:
1. Pricing Model (e.g., Subscription, One-time Purchase, Freemium).
2. Estimated Price (monthly or per unit).
3. Estimated CAC (Cost to Acquire a Customer).
4. Estimated COGS (Cost of Goods Sold / server costs per user).
5. Projected Users (month 12 realistic target for a solo founder).
6. A short 1-sentence insight about the economics (e.g., "High margin but high CAC")."""


def normalize_currency(raw: Any) -> str:
    value = coerce_str(raw)
    if value in {c.value for c in Currency}:
        return value
    logger.info("financial_currency_defaulted", received=value)
    return Currency.DOLLAR.value


def normalize_metrics(raw: Any) -> dict[str, float]:
    raw = raw if isinstance(raw, dict) else {}
    metrics = {}
    for name in METRIC_FIELDS:
        value = raw.get(name)
        if isinstance(value, bool) or not isinstance(value, int | float) or not math.isfinite(value):
            value = 0.0
        metrics[name] = max(float(value), 0.0)
    return metrics


class FinancialService:
    """Financial model orchestrator.

    Public API:
        estimate(topic, stage) -> FinancialModel
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway

    async def estimate(self, topic: str, stage: BusinessStage) -> FinancialModel:
        reply = await self._gateway.generate_structured(build_financial_prompt(topic, stage), FINANCIAL_SCHEMA)
        data = reply.data
        return FinancialModel.decode(
            {
                "pricingModel": coerce_str(data.get("pricingModel")),
                "currency": normalize_currency(data.get("currency")),
                "metrics": normalize_metrics(data.get("metrics")),
                "insight": coerce_str(data.get("insight")),
            },
            feature="financials",
        )
