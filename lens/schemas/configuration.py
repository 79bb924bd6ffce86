"""Closed configuration enumerations and the request configuration record."""

from enum import StrEnum

from pydantic import field_validator

from lens.schemas.base import LensModel


class BusinessStage(StrEnum):
    IDEATION = "Ideation"
    MVP = "MVP"
    GROWTH = "Growth"
    SCALE = "Scale"


class VisualStyle(StrEnum):
    MODERN_SAAS = "Modern SaaS"
    TECH_DARK = "Tech Dark"
    WHITEBOARD = "Whiteboard"
    CORPORATE = "Corporate"
    VIBRANT_STARTUP = "Vibrant Startup"
    DATA_PROFESSIONAL = "Data Professional"


class BusinessFocus(StrEnum):
    STRATEGY = "Strategy"
    MARKETING = "Marketing"
    PRODUCT = "Product"
    INVESTORS = "Investors"
    OPERATIONS = "Operations"
    SALES = "Sales"


class MockupType(StrEnum):
    MOBILE_APP = "Mobile App"
    SAAS_DASHBOARD = "SaaS Dashboard"
    PHYSICAL_PRODUCT = "Physical Product"
    MARKETING_WEBSITE = "Marketing Website"


class Profile(LensModel):
    """Saved founder preferences: everything but the topic."""

    stage: BusinessStage = BusinessStage.IDEATION
    style: VisualStyle = VisualStyle.MODERN_SAAS
    focus: BusinessFocus = BusinessFocus.STRATEGY


class RequestConfiguration(Profile):
    """Inputs for a generation call. topic must be non-blank."""

    topic: str

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a business topic to visualize.")
        return v

    @property
    def profile(self) -> Profile:
        return Profile(stage=self.stage, style=self.style, focus=self.focus)
