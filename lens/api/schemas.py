"""Request and response bodies of the HTTP surface.

Binary payloads cross the wire as data URLs (images) or base64 (audio).
"""

import base64

from pydantic import Field

from lens.gateway.payloads import to_data_url
from lens.schemas.artifacts import (
    CompetitorAnalysis,
    FinancialModel,
    GeneratedImage,
    PitchKit,
    ProductMockup,
    RiskAnalysis,
)
from lens.schemas.base import LensModel
from lens.schemas.board import BoardMeeting, BoardMessage
from lens.schemas.configuration import BusinessFocus, BusinessStage, MockupType, Profile, VisualStyle
from lens.schemas.research import ResearchResult
from lens.schemas.strategy_map import StrategyMapData
from lens.services.studio import DEFAULT_OWNER, Studio

# ---------- Requests ----------


class CreateStudioRequest(LensModel):
    owner_id: str = Field(default=DEFAULT_OWNER, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")


class TopicRequest(LensModel):
    topic: str


class InstructionRequest(LensModel):
    instruction: str


class QuestionRequest(LensModel):
    question: str


class MockupRequest(LensModel):
    type: MockupType


# ---------- Responses ----------


class EntitlementResponse(LensModel):
    has_api_key: bool


class OptimizeResponse(LensModel):
    topic: str


class ImageView(LensModel):
    id: str
    image: str
    prompt: str
    topic: str
    timestamp: int
    stage: BusinessStage | None = None
    style: VisualStyle | None = None
    focus: BusinessFocus | None = None

    @classmethod
    def of(cls, image: GeneratedImage) -> "ImageView":
        return cls(
            id=image.id,
            image=to_data_url(image.data, image.mime_type),
            prompt=image.prompt,
            topic=image.topic,
            timestamp=image.timestamp,
            stage=image.stage,
            style=image.style,
            focus=image.focus,
        )


class MockupView(LensModel):
    type: MockupType
    image: str
    caption: str

    @classmethod
    def of(cls, mockup: ProductMockup) -> "MockupView":
        return cls(type=mockup.type, image=to_data_url(mockup.image_data, mockup.mime_type), caption=mockup.caption)


class AudioResponse(LensModel):
    playing: bool
    audio: str | None = None
    mime_type: str | None = None


class ChatResponse(LensModel):
    replies: list[BoardMessage] = Field(default_factory=list)
    meeting: BoardMeeting


class StudioSnapshot(LensModel):
    id: str
    owner_id: str
    profile: Profile
    history: list[ImageView] = Field(default_factory=list)
    research: ResearchResult | None = None
    risk: RiskAnalysis | None = None
    board: BoardMeeting | None = None
    strategy_map: StrategyMapData | None = None
    pitch: PitchKit | None = None
    competitors: CompetitorAnalysis | None = None
    financials: FinancialModel | None = None
    mockup: MockupView | None = None
    audio_playing: bool = False
    in_flight: list[str] = Field(default_factory=list)

    @classmethod
    def of(cls, studio: Studio) -> "StudioSnapshot":
        return cls(
            id=studio.id,
            owner_id=studio.owner_id,
            profile=studio.profile,
            history=[ImageView.of(image) for image in studio.history],
            research=studio.research,
            risk=studio.risk,
            board=studio.board,
            strategy_map=studio.strategy_map,
            pitch=studio.pitch,
            competitors=studio.competitors,
            financials=studio.financials,
            mockup=MockupView.of(studio.mockup) if studio.mockup else None,
            audio_playing=studio.audio.is_playing,
            in_flight=sorted(studio.guard.in_flight),
        )


def encode_audio(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
