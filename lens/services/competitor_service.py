"""CompetitorService: web-grounded scan for three real competitors and the market gap."""

from typing import Any

import structlog

from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str
from lens.gateway.protocol import Gateway
from lens.schemas.artifacts import COMPETITOR_COUNT, CompetitorAnalysis

logger = structlog.get_logger(__name__)

COMPETITOR_SCHEMA = s.obj(
    {
        "competitors": s.array(
            s.obj(
                {
                    "name": s.string(),
                    "description": s.string(),
                    "theirEdge": s.string("What they do best"),
                    "yourEdge": s.string("How a new solo founder could beat them"),
                }
            )
        ),
        "marketGap": s.string("One statement summarising the opportunity"),
    },
    required=["competitors", "marketGap"],
)


def build_competitor_prompt(topic: str) -> str:
    return f"""Research real-world competitors for a business described as: "{topic}".
Identify {COMPETITOR_COUNT} specific, real companies that are direct competitors.

For each competitor:
1. Name & Description.
2. "Their Edge" (what they do best).
3. "Your Edge" (how a new solo founder could beat them, e.g. niche focus, price, speed, personalization).

Also provide a "Market Gap" statement summarizing the opportunity.

Use Google Search to find actual companies."""


def normalize_competitors(raw: Any) -> list[dict[str, str]]:
    competitors = []
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict):
            continue
        name = coerce_str(entry.get("name"))
        if not name:
            continue
        competitors.append(
            {
                "name": name,
                "description": coerce_str(entry.get("description")),
                "theirEdge": coerce_str(entry.get("theirEdge")),
                "yourEdge": coerce_str(entry.get("yourEdge")),
            }
        )
    return competitors


class CompetitorService:
    """Competitor scan orchestrator.

    Public API:
        analyze(topic) -> CompetitorAnalysis
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway

    async def analyze(self, topic: str) -> CompetitorAnalysis:
        reply = await self._gateway.generate_structured(
            build_competitor_prompt(topic),
            COMPETITOR_SCHEMA,
            web_grounding=True,
        )
        competitors = normalize_competitors(reply.data.get("competitors"))
        if len(competitors) != COMPETITOR_COUNT:
            logger.info("competitor_cardinality_normalized", topic=topic, received=len(competitors))

        return CompetitorAnalysis.decode(
            {
                "competitors": competitors[:COMPETITOR_COUNT],
                "marketGap": coerce_str(reply.data.get("marketGap")),
            },
            feature="competitors",
        )
