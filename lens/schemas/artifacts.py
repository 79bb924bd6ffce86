"""Derived artifact records.

Each is produced fresh by one orchestrator call and replaced wholesale on
regeneration.
"""

from enum import StrEnum

from pydantic import Field

from lens.schemas.base import LensModel
from lens.schemas.configuration import BusinessFocus, BusinessStage, MockupType, VisualStyle

RISK_ITEMS = 3
COMPETITOR_COUNT = 3


class RiskAnalysis(LensModel):
    fatal_flaws: list[str] = Field(default_factory=list, max_length=RISK_ITEMS)
    mitigations: list[str] = Field(default_factory=list, max_length=RISK_ITEMS)
    viability_score: int = Field(ge=0, le=100)


class PitchKit(LensModel):
    one_liner: str = ""
    value_proposition: str = ""
    elevator_pitch: str = ""
    email_template: str = ""
    social_post: str = ""


class Competitor(LensModel):
    name: str
    description: str = ""
    their_edge: str = ""
    your_edge: str = ""


class CompetitorAnalysis(LensModel):
    competitors: list[Competitor] = Field(default_factory=list, max_length=COMPETITOR_COUNT)
    market_gap: str = ""


class Currency(StrEnum):
    DOLLAR = "$"
    EURO = "€"
    POUND = "£"


class UnitEconomics(LensModel):
    price: float = 0.0
    cac: float = 0.0
    cogs: float = 0.0
    users: float = 0.0


class FinancialModel(LensModel):
    pricing_model: str = ""
    currency: Currency = Currency.DOLLAR
    metrics: UnitEconomics = Field(default_factory=UnitEconomics)
    insight: str = ""


class ProductMockup(LensModel):
    type: MockupType
    image_data: bytes
    mime_type: str = "image/png"
    caption: str


class GeneratedImage(LensModel):
    """One entry of the infographic history.

    prompt is what produced the image (the topic, or the edit instruction);
    topic is the business idea the image belongs to.
    """

    id: str
    data: bytes
    mime_type: str = "image/png"
    prompt: str
    topic: str
    timestamp: int
    stage: BusinessStage | None = None
    style: VisualStyle | None = None
    focus: BusinessFocus | None = None


class AudioBrief(LensModel):
    data: bytes
    mime_type: str
