"""GatewayFake: Scenario-based test double for the Gateway protocol.

Provides deterministic, instant responses for 4 named scenarios:
- happy_path: realistic replies for every feature
- auth_failure: every call fails with an entitlement error
- backend_failure: every call fails with a generic backend error
- empty_payload: structured calls succeed, image/speech replies carry no bytes

Structured replies are picked by a signature property of the requested schema
("imagePrompt" for research, "fatalFlaws" for risk, ...), and can be replaced
per test with set_structured(). Every call is recorded in .calls.
Setting .hold to an asyncio.Event parks every call until the event is set.
"""

import asyncio
import copy
from dataclasses import dataclass
from typing import Any

from lens.core.exceptions import AuthorizationFailure, BackendFailure
from lens.gateway.protocol import GroundingCitation, InlinePayload, ReferenceImage, StructuredReply

FAKE_PNG = b"\x89PNG\r\n\x1a\n" + b"lens-fake-image"
FAKE_PCM = b"\x00\x01" * 32
PCM_MIME = "audio/L16;codec=pcm;rate=24000"


@dataclass(frozen=True)
class GatewayCall:
    capability: str
    prompt: str
    schema: dict[str, Any] | None = None
    web_grounding: bool = False
    reference: ReferenceImage | None = None
    voice: str | None = None


_HAPPY_PATH: dict[str, dict[str, Any]] = {
    "imagePrompt": {
        "facts": [
            "The global smart gardening market is projected to grow 12% annually",
            "68% of millennials own at least one houseplant",
            "Plant care apps saw 3x downloads since 2020",
        ],
        "imagePrompt": "Clean isometric infographic of a plant care app ecosystem, indigo accents",
        "insights": {
            "swot": {
                "strengths": ["Growing plant-owner base", "Low hardware cost"],
                "weaknesses": ["Crowded app stores"],
                "opportunities": ["Sensor partnerships", "Subscription nutrients"],
                "threats": ["Incumbent garden retailers"],
            },
            "pivots": ["B2B greenhouse monitoring", "Plant subscription box"],
        },
        "trend": {
            "label": "Search Interest",
            "value": "+24% YoY",
            "data": [30, 35, 42, 50, 58, 66, 75],
            "direction": "up",
        },
    },
    "fatalFlaws": {
        "fatalFlaws": ["Low willingness to pay", "High churn after novelty", "Sensor hardware margins"],
        "mitigations": ["Freemium with premium diagnostics", "Seasonal engagement loops", "Partner for sensors"],
        "viabilityScore": 72,
    },
    "advisors": {
        "advisors": [
            {"role": "CFO", "name": "Marcus", "avatarColor": "#10B981", "advice": "Keep burn under 2k a month.",
             "concern": "CAC will outrun subscription revenue.", "verdict": "Pivot"},
            {"role": "CMO", "name": "Sarah", "avatarColor": "#EC4899", "advice": "Build a plant-parent community.",
             "concern": "Marcus will starve the launch.", "verdict": "Approve"},
            {"role": "CTO", "name": "Alex", "avatarColor": "#3B82F6", "advice": "Ship photo diagnosis first.",
             "concern": "Model accuracy on rare species.", "verdict": "Approve"},
        ],
        "synthesis": "The board agrees on the market but splits on how fast to spend.",
    },
    "messages": {
        "messages": [
            {"role": "CFO", "name": "Marcus", "text": "Only if the unit economics hold at 5 dollars a month."},
        ],
    },
    "nodes": {
        "nodes": [
            {"id": "app", "label": "Plant Care App", "category": "Product"},
            {"id": "owners", "label": "Houseplant Owners", "category": "Market"},
            {"id": "content", "label": "Care Content Ops", "category": "Operation"},
            {"id": "subs", "label": "Subscriptions", "category": "Finance"},
            {"id": "accuracy", "label": "Diagnosis Accuracy", "category": "Risk"},
            {"id": "retail", "label": "Retail Partners", "category": "Market"},
        ],
        "edges": [
            {"from": "app", "to": "owners", "label": "Distribution"},
            {"from": "owners", "to": "subs", "label": "Revenue"},
            {"from": "content", "to": "app"},
            {"from": "accuracy", "to": "app", "label": "Trust"},
        ],
    },
    "oneLiner": {
        "oneLiner": "Never lose a plant again.",
        "valueProposition": "Personalised care plans from a single photo.",
        "elevatorPitch": "Plants die because owners guess. We diagnose from a photo and schedule care.",
        "emailTemplate": "Hi, I'm building a plant care app and would love 15 minutes of your time.",
        "socialPost": "Your plants deserve better than guesswork. Launching soon.",
    },
    "competitors": {
        "competitors": [
            {"name": "Planta", "description": "Care reminders app", "theirEdge": "Large user base",
             "yourEdge": "Photo diagnosis"},
            {"name": "Greg", "description": "Watering calculator", "theirEdge": "Precise watering",
             "yourEdge": "Community features"},
            {"name": "PictureThis", "description": "Plant identification", "theirEdge": "ID accuracy",
             "yourEdge": "Ongoing care plans"},
        ],
        "marketGap": "No one pairs diagnosis with a guided recovery plan.",
    },
    "pricingModel": {
        "pricingModel": "Subscription",
        "currency": "$",
        "metrics": {"price": 5, "cac": 12, "cogs": 0.5, "users": 1500},
        "insight": "Healthy margin but CAC needs organic channels.",
    },
}

_HAPPY_PATH_CITATIONS = [
    GroundingCitation(title="Smart Gardening Market Report", url="https://example.com/market"),
    GroundingCitation(title="Houseplant Trends", url="https://example.com/trends"),
]


class GatewayFake:
    """Scenario-based test double for the Gateway protocol."""

    VALID_SCENARIOS = {"happy_path", "auth_failure", "backend_failure", "empty_payload"}

    def __init__(self, scenario: str = "happy_path"):
        """Initialize GatewayFake with a named scenario.

        Raises:
            ValueError: If scenario is not recognized
        """
        if scenario not in self.VALID_SCENARIOS:
            raise ValueError(f"Unknown scenario: {scenario}. Valid scenarios: {self.VALID_SCENARIOS}")
        self.scenario = scenario
        self.calls: list[GatewayCall] = []
        self.hold: asyncio.Event | None = None
        self.optimized_text = "A photo-first plant care companion that diagnoses problems and schedules care."
        self._structured = copy.deepcopy(_HAPPY_PATH)
        self._citations: dict[str, list[GroundingCitation]] = {"imagePrompt": list(_HAPPY_PATH_CITATIONS)}

    def set_structured(
        self,
        signature: str,
        data: dict[str, Any],
        citations: list[GroundingCitation] | None = None,
    ) -> None:
        """Replace the reply for schemas containing the signature property."""
        self._structured[signature] = data
        if citations is not None:
            self._citations[signature] = citations

    def calls_for(self, capability: str) -> list[GatewayCall]:
        return [c for c in self.calls if c.capability == capability]

    async def generate_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        *,
        web_grounding: bool = False,
    ) -> StructuredReply:
        await self._enter(GatewayCall("structured", prompt, schema=schema, web_grounding=web_grounding))
        signature = self._signature(schema)
        data = copy.deepcopy(self._structured.get(signature, {}))
        citations = list(self._citations.get(signature, [])) if web_grounding else []
        return StructuredReply(data=data, citations=citations)

    async def generate_text(self, prompt: str) -> str:
        await self._enter(GatewayCall("text", prompt))
        return self.optimized_text

    async def generate_image(
        self,
        prompt: str,
        reference: ReferenceImage | None = None,
    ) -> InlinePayload | None:
        await self._enter(GatewayCall("image", prompt, reference=reference))
        if self.scenario == "empty_payload":
            return None
        return InlinePayload(data=FAKE_PNG, mime_type="image/png")

    async def generate_speech(self, prompt: str, voice: str) -> InlinePayload | None:
        await self._enter(GatewayCall("speech", prompt, voice=voice))
        if self.scenario == "empty_payload":
            return None
        return InlinePayload(data=FAKE_PCM, mime_type=PCM_MIME)

    async def _enter(self, call: GatewayCall) -> None:
        self.calls.append(call)
        if self.hold is not None:
            await self.hold.wait()
        if self.scenario == "auth_failure":
            raise AuthorizationFailure("403 PERMISSION_DENIED. Requested entity was not found.")
        if self.scenario == "backend_failure":
            raise BackendFailure("503 UNAVAILABLE. The model is overloaded.")

    def _signature(self, schema: dict[str, Any]) -> str | None:
        properties = schema.get("properties", {})
        for signature in self._structured:
            if signature in properties:
                return signature
        return None
