"""AudioService: spoken executive summary of the research.

The narration prompt carries a condensed digest (topic, facts, top two
strengths and opportunities, top pivot) instead of the full insight object.
"""

import structlog

from lens.core.config import get_settings
from lens.core.exceptions import EmptyPayload
from lens.gateway.protocol import Gateway
from lens.schemas.artifacts import AudioBrief
from lens.schemas.research import BusinessInsight

logger = structlog.get_logger(__name__)

DIGEST_STRENGTHS: int = 2
DIGEST_OPPORTUNITIES: int = 2
DIGEST_PIVOTS: int = 1


def build_digest(topic: str, insights: BusinessInsight, facts: list[str]) -> str:
    return "\n".join(
        [
            f"Topic: {topic}",
            f"Key Facts: {', '.join(facts)}",
            f"Strengths: {', '.join(insights.swot.strengths[:DIGEST_STRENGTHS])}",
            f"Opportunities: {', '.join(insights.swot.opportunities[:DIGEST_OPPORTUNITIES])}",
            f"Pivots: {', '.join(insights.pivots[:DIGEST_PIVOTS])}",
        ]
    )


def build_narration_prompt(digest: str) -> str:
    return f"""You are a senior business analyst briefing a solo founder.
Give a high-energy, 30-second executive summary of the following business analysis.
Be encouraging but realistic. Speak directly to the founder.

Data:
{digest}"""


class AudioService:
    """Audio brief orchestrator.

    Public API:
        generate(topic, insights, facts) -> AudioBrief
    """

    def __init__(self, gateway: Gateway, voice: str | None = None):
        self._gateway = gateway
        self._voice = voice

    async def generate(self, topic: str, insights: BusinessInsight, facts: list[str]) -> AudioBrief:
        voice = self._voice or get_settings().narrator_voice
        prompt = build_narration_prompt(build_digest(topic, insights, facts))
        payload = await self._gateway.generate_speech(prompt, voice)
        if payload is None or not payload.data:
            logger.warning("empty_payload", capability="audio")
            raise EmptyPayload("audio")
        return AudioBrief(data=payload.data, mime_type=payload.mime_type)
