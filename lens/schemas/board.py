"""Board of advisors records.

The board always seats the same three roles. chat_history is append-only and
in send order; see lens.domain.conversation for the transitions.
"""

from enum import StrEnum

from pydantic import Field, field_validator

from lens.schemas.base import LensModel


class AdvisorRole(StrEnum):
    CFO = "CFO"
    CMO = "CMO"
    CTO = "CTO"


class SpeakerRole(StrEnum):
    USER = "User"
    CFO = "CFO"
    CMO = "CMO"
    CTO = "CTO"
    SYSTEM = "System"


class Verdict(StrEnum):
    APPROVE = "Approve"
    REJECT = "Reject"
    PIVOT = "Pivot"


BOARD_ROLES: tuple[AdvisorRole, ...] = (AdvisorRole.CFO, AdvisorRole.CMO, AdvisorRole.CTO)


class Advisor(LensModel):
    role: AdvisorRole
    name: str
    avatar_color: str = Field(pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")
    advice: str = ""
    concern: str = ""
    verdict: Verdict


class BoardMessage(LensModel):
    role: SpeakerRole
    name: str
    text: str
    timestamp: int


class BoardMeeting(LensModel):
    advisors: list[Advisor]
    synthesis: str = ""
    chat_history: list[BoardMessage] = Field(default_factory=list)

    @field_validator("advisors")
    @classmethod
    def one_seat_per_role(cls, v: list[Advisor]) -> list[Advisor]:
        if tuple(a.role for a in v) != BOARD_ROLES:
            raise ValueError("board must seat exactly one CFO, CMO and CTO, in that order")
        return v

    def advisor(self, role: AdvisorRole) -> Advisor:
        return next(a for a in self.advisors if a.role == role)
