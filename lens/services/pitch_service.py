"""PitchService: five pieces of launch copy tailored to stage and focus."""

import structlog

from lens.domain.instructions import focus_instruction, stage_instruction
from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str
from lens.gateway.protocol import Gateway
from lens.schemas.artifacts import PitchKit
from lens.schemas.configuration import BusinessFocus, BusinessStage

logger = structlog.get_logger(__name__)

PITCH_FIELDS = ("oneLiner", "valueProposition", "elevatorPitch", "emailTemplate", "socialPost")

PITCH_SCHEMA = s.obj(
    {
        "oneLiner": s.string("A compelling H1 headline for a landing page"),
        "valueProposition": s.string("A concise 1-sentence statement of the core benefit"),
        "elevatorPitch": s.string("A 30-second conversational script using Problem-Agitate-Solution"),
        "emailTemplate": s.string("A short, punchy cold email to an investor or partner"),
        "socialPost": s.string("A viral-style post announcing the concept"),
    },
    required=list(PITCH_FIELDS),
)


def build_pitch_prompt(topic: str, stage: BusinessStage, focus: BusinessFocus) -> str:
    return f"""You are a professional copywriter for high-growth startups.
Generate a "Pitch Kit" for the following business:
Topic: "{topic}"

CONFIGURATION:
Stage: {stage} ({stage_instruction(stage)})
Focus: {focus} ({focus_instruction(focus)})

Create 5 distinct assets tailored specifically to this stage and focus:
1. One-Liner (Hook): A compelling H1 headline for a landing page.
2. Value Proposition: A concise 1-sentence statement of the core benefit.
3. Elevator Pitch: A 30-second conversational script (approx 60-80 words) using the PAS framework.
4. Cold Email Template: A short, punchy email to an investor/partner.
5. Social Post: A viral-style tweet/LinkedIn post announcing the concept.

Tone: Professional, persuasive, and tailored to the '{stage}' stage."""


class PitchService:
    """Pitch kit orchestrator.

    Public API:
        generate(topic, stage, focus) -> PitchKit
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway

    async def generate(self, topic: str, stage: BusinessStage, focus: BusinessFocus) -> PitchKit:
        reply = await self._gateway.generate_structured(build_pitch_prompt(topic, stage, focus), PITCH_SCHEMA)
        fields = {name: coerce_str(reply.data.get(name)) for name in PITCH_FIELDS}

        missing = [name for name, value in fields.items() if not value]
        if missing:
            logger.info("pitch_fields_defaulted", topic=topic, fields=missing)
        return PitchKit.decode(fields, feature="pitch")
