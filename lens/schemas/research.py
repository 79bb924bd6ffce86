"""Market research records: facts, citations, SWOT insight and trend sparkline."""

from enum import StrEnum

from pydantic import Field, field_validator

from lens.schemas.base import LensModel

MAX_FACTS = 5
TREND_POINTS = 7


class SearchResultItem(LensModel):
    title: str
    url: str


class Swot(LensModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    threats: list[str] = Field(default_factory=list)


class BusinessInsight(LensModel):
    swot: Swot = Field(default_factory=Swot)
    pivots: list[str] = Field(default_factory=list)


class TrendDirection(StrEnum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class TrendData(LensModel):
    """Sparkline for market interest: exactly 7 points, each within 0-100."""

    label: str
    value: str
    data: list[float]
    direction: TrendDirection

    @field_validator("data")
    @classmethod
    def seven_points_in_range(cls, v: list[float]) -> list[float]:
        if len(v) != TREND_POINTS:
            raise ValueError(f"trend data must have exactly {TREND_POINTS} points, got {len(v)}")
        if any(point < 0 or point > 100 for point in v):
            raise ValueError("trend points must lie within 0-100")
        return v


DEFAULT_TREND = TrendData(
    label="Market Activity",
    value="Stable",
    data=[40, 45, 50, 55, 50, 45, 40],
    direction=TrendDirection.NEUTRAL,
)


class ResearchResult(LensModel):
    image_prompt: str
    facts: list[str] = Field(default_factory=list, max_length=MAX_FACTS)
    search_results: list[SearchResultItem] = Field(default_factory=list)
    insights: BusinessInsight = Field(default_factory=BusinessInsight)
    trend: TrendData = DEFAULT_TREND
