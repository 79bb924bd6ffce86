"""ResearchService: web-grounded market research and topic optimisation.

Architecture:
- One structured call with live web grounding returns facts, an infographic
  prompt, SWOT + pivots and a 7-point trend sparkline
- Grounding citations arrive on the side channel and become search_results,
  deduplicated by url (last title seen wins, first position kept)
- Missing fields are defaulted before validation: no facts -> [], no
  imagePrompt -> composed from the instruction fragments, no trend ->
  DEFAULT_TREND; a partial trend is padded/clamped to 7 points in 0-100
"""

from typing import Any

import structlog

from lens.domain.instructions import focus_instruction, stage_instruction, style_instruction
from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str, coerce_str_list
from lens.gateway.protocol import Gateway, GroundingCitation
from lens.schemas.configuration import BusinessStage, RequestConfiguration
from lens.schemas.research import DEFAULT_TREND, MAX_FACTS, TREND_POINTS, ResearchResult, TrendDirection

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_OPTIMIZE_LENGTH: int = 3
SWOT_KEYS = ("strengths", "weaknesses", "opportunities", "threats")

RESEARCH_SCHEMA = s.obj(
    {
        "facts": s.string_list(f"Up to {MAX_FACTS} key metrics or facts about the market"),
        "imagePrompt": s.string(
            "A highly detailed image generation prompt describing composition, colors and layout"
        ),
        "insights": s.obj(
            {
                "swot": s.obj(
                    {
                        "strengths": s.string_list(),
                        "weaknesses": s.string_list(),
                        "opportunities": s.string_list(),
                        "threats": s.string_list(),
                    }
                ),
                "pivots": s.string_list("Short alternative business ideas"),
            }
        ),
        "trend": s.obj(
            {
                "label": s.string("Label for the trend (e.g. '5-Year Forecast', 'Search Interest')"),
                "value": s.string("The aggregate value or growth (e.g. '+24% CAGR', 'High Demand')"),
                "data": s.array(s.number(), f"Array of {TREND_POINTS} integers from 0-100 (sparkline points)"),
                "direction": s.string("Overall trend direction", enum=[d.value for d in TrendDirection]),
            },
            description="A visual representation of market trend/interest over time",
        ),
    }
)


# ---------------------------------------------------------------------------
# Prompt builders
# ---------------------------------------------------------------------------


def build_research_prompt(config: RequestConfiguration) -> str:
    return f"""You are an expert business consultant and visual strategist for solo founders.
Your goal is to research the topic: "{config.topic}" and create a plan for a business infographic.

IMPORTANT: Use the Google Search tool to find the most accurate, up-to-date market data and trends about this topic.

{stage_instruction(config.stage)}
{style_instruction(config.style)}
{focus_instruction(config.focus)}

Return:
- facts: up to {MAX_FACTS} key metrics or facts
- imagePrompt: a detailed image generation prompt for the infographic, tailored to the aesthetic, without citations
- insights: a SWOT analysis and 'pivots' (short alternative business ideas)
- trend: a {TREND_POINTS}-point sparkline (0-100) of market interest or growth over time"""


def build_optimize_prompt(topic: str, stage: BusinessStage) -> str:
    return f"""You are a startup mentor. Rewrite the following business idea into a concise but specific \
2-sentence description suitable for generating a strategic visualization.
User Input: "{topic}"
Business Stage: {stage}

Make it sound professional and visionary. Do not add quotation marks."""


def fallback_image_prompt(config: RequestConfiguration) -> str:
    return (
        f"Create a detailed business infographic about {config.topic}. "
        f"{stage_instruction(config.stage)} {style_instruction(config.style)} {focus_instruction(config.focus)}"
    )


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def dedupe_citations(citations: list[GroundingCitation]) -> list[dict[str, str]]:
    """Collapse citations sharing a url; the last title wins, the first position is kept."""
    by_url: dict[str, dict[str, str]] = {}
    for citation in citations:
        by_url[citation.url] = {"title": citation.title, "url": citation.url}
    return list(by_url.values())


def normalize_trend(raw: Any) -> dict[str, Any]:
    """Coerce a model trend into exactly TREND_POINTS points within 0-100.

    Anything unusable (missing, not an object, no numeric points) yields DEFAULT_TREND.
    """
    default = DEFAULT_TREND.model_dump(by_alias=True)
    if not isinstance(raw, dict):
        return default

    series = raw.get("data") if isinstance(raw.get("data"), list) else []
    points = [float(p) for p in series if isinstance(p, int | float) and not isinstance(p, bool)]
    if not points:
        return default
    points = points[:TREND_POINTS]
    points += [points[-1]] * (TREND_POINTS - len(points))
    points = [min(max(p, 0.0), 100.0) for p in points]

    direction = raw.get("direction")
    if direction not in {d.value for d in TrendDirection}:
        direction = TrendDirection.NEUTRAL.value

    return {
        "label": coerce_str(raw.get("label"), default["label"]),
        "value": coerce_str(raw.get("value"), default["value"]),
        "data": points,
        "direction": direction,
    }


def normalize_insights(raw: Any) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    swot = raw.get("swot") if isinstance(raw.get("swot"), dict) else {}
    return {
        "swot": {key: coerce_str_list(swot.get(key)) for key in SWOT_KEYS},
        "pivots": coerce_str_list(raw.get("pivots")),
    }


# ---------------------------------------------------------------------------
# ResearchService
# ---------------------------------------------------------------------------


class ResearchService:
    """Market research orchestrator.

    Public API:
        research(config) -> ResearchResult
        optimize_topic(topic, stage) -> str
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway

    async def research(self, config: RequestConfiguration) -> ResearchResult:
        reply = await self._gateway.generate_structured(
            build_research_prompt(config),
            RESEARCH_SCHEMA,
            web_grounding=True,
        )
        data = reply.data

        facts = coerce_str_list(data.get("facts"))
        if len(facts) > MAX_FACTS:
            logger.info("research_facts_truncated", topic=config.topic, received=len(facts))

        image_prompt = data.get("imagePrompt")
        if not isinstance(image_prompt, str) or not image_prompt.strip():
            logger.info("research_image_prompt_defaulted", topic=config.topic)
            image_prompt = fallback_image_prompt(config)

        if "trend" not in data:
            logger.info("research_trend_defaulted", topic=config.topic)

        search_results = dedupe_citations(reply.citations)
        logger.info(
            "research_completed",
            topic=config.topic,
            facts=min(len(facts), MAX_FACTS),
            citations=len(search_results),
        )
        return ResearchResult.decode(
            {
                "imagePrompt": image_prompt,
                "facts": facts[:MAX_FACTS],
                "searchResults": search_results,
                "insights": normalize_insights(data.get("insights")),
                "trend": normalize_trend(data.get("trend")),
            },
            feature="research",
        )

    async def optimize_topic(self, topic: str, stage: BusinessStage) -> str:
        """Rewrite a short idea into a two-sentence visionary description.

        Inputs shorter than MIN_OPTIMIZE_LENGTH come back unchanged without a
        backend call; an empty rewrite falls back to the input.
        """
        if len(topic) < MIN_OPTIMIZE_LENGTH:
            return topic
        rewritten = await self._gateway.generate_text(build_optimize_prompt(topic, stage))
        if not rewritten:
            logger.info("optimize_empty_reply", topic=topic)
            return topic
        return rewritten

