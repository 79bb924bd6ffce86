"""RiskService: skeptical-investor risk assessment (no web grounding)."""

from typing import Any

import structlog

from lens.core.exceptions import MalformedResponse
from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str_list
from lens.gateway.protocol import Gateway
from lens.schemas.artifacts import RISK_ITEMS, RiskAnalysis
from lens.schemas.configuration import BusinessFocus, BusinessStage

logger = structlog.get_logger(__name__)

RISK_SCHEMA = s.obj(
    {
        "fatalFlaws": s.string_list(f"Exactly {RISK_ITEMS} reasons this business might fail"),
        "mitigations": s.string_list(f"Exactly {RISK_ITEMS} strategies to fix the flaws"),
        "viabilityScore": s.integer("Viability score from 0 to 100"),
    },
    required=["fatalFlaws", "mitigations", "viabilityScore"],
)


def build_risk_prompt(topic: str, stage: BusinessStage, focus: BusinessFocus) -> str:
    return f"""Act as a skeptical Venture Capitalist and Risk Officer.
Critically analyze this business concept for a solo founder.

Topic: {topic}
Stage: {stage}
Focus: {focus}

Identify {RISK_ITEMS} "Fatal Flaws" (why this might fail) and {RISK_ITEMS} "Mitigation Strategies" (how to fix it).
Also provide a "Viability Score" from 0 to 100."""


def normalize_score(raw: Any) -> int:
    """Round and clamp a model score into 0-100.

    Raises:
        MalformedResponse: if the score is missing or not numeric
    """
    if isinstance(raw, bool) or not isinstance(raw, int | float | str):
        raise MalformedResponse("risk", "viabilityScore is missing or not a number")
    try:
        score = round(float(raw))
    except (ValueError, OverflowError) as e:
        raise MalformedResponse("risk", f"viabilityScore {raw!r} is not a number") from e
    return min(max(score, 0), 100)


class RiskService:
    """Risk assessment orchestrator.

    Public API:
        analyze(topic, stage, focus) -> RiskAnalysis
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway

    async def analyze(self, topic: str, stage: BusinessStage, focus: BusinessFocus) -> RiskAnalysis:
        reply = await self._gateway.generate_structured(build_risk_prompt(topic, stage, focus), RISK_SCHEMA)
        data = reply.data

        flaws = coerce_str_list(data.get("fatalFlaws"))
        mitigations = coerce_str_list(data.get("mitigations"))
        if len(flaws) != RISK_ITEMS or len(mitigations) != RISK_ITEMS:
            logger.info(
                "risk_cardinality_normalized",
                topic=topic,
                fatal_flaws=len(flaws),
                mitigations=len(mitigations),
            )

        return RiskAnalysis.decode(
            {
                "fatalFlaws": flaws[:RISK_ITEMS],
                "mitigations": mitigations[:RISK_ITEMS],
                "viabilityScore": normalize_score(data.get("viabilityScore")),
            },
            feature="risk",
        )
