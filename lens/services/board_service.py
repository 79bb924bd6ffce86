"""BoardService: simulated board of advisors and in-character follow-up chat.

Architecture:
- convene(): one structured call seats the fixed CFO/CMO/CTO roster with
  conflicting stances and a one-sentence synthesis; chat_history starts empty
- ask(): grounding context is the advisors' role + verdict only, never the
  chat history, so the prompt stays bounded however long the chat runs
- ask() returns only the new advisor messages; folding them (and the founder's
  question) into the meeting is the caller's job, see lens.domain.conversation
- Timestamps are stamped locally from an injectable millisecond clock
"""

import re
from collections.abc import Callable
from typing import Any

import structlog

from lens.core.exceptions import MalformedResponse
from lens.domain.conversation import board_stances, now_ms
from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str
from lens.gateway.protocol import Gateway
from lens.schemas.board import BOARD_ROLES, AdvisorRole, BoardMeeting, BoardMessage, Verdict
from lens.schemas.configuration import BusinessStage

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

MAX_REPLIES: int = 2
REPLY_WORD_LIMIT: int = 30

ADVISOR_NAMES: dict[AdvisorRole, str] = {
    AdvisorRole.CFO: "Marcus",
    AdvisorRole.CMO: "Sarah",
    AdvisorRole.CTO: "Alex",
}

ADVISOR_COLORS: dict[AdvisorRole, str] = {
    AdvisorRole.CFO: "#10B981",
    AdvisorRole.CMO: "#EC4899",
    AdvisorRole.CTO: "#3B82F6",
}

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

_ROLE_ENUM = [role.value for role in BOARD_ROLES]

ADVISOR_SCHEMA = s.obj(
    {
        "role": s.string(enum=_ROLE_ENUM),
        "name": s.string(),
        "avatarColor": s.string("A hex color code matching the persona"),
        "advice": s.string(),
        "concern": s.string(),
        "verdict": s.string(enum=[v.value for v in Verdict]),
    }
)

BOARD_SCHEMA = s.obj(
    {
        "advisors": s.array(ADVISOR_SCHEMA),
        "synthesis": s.string("One sentence summarising the conflict"),
    },
    required=["advisors", "synthesis"],
)

CHAT_SCHEMA = s.obj(
    {
        "messages": s.array(
            s.obj(
                {
                    "role": s.string(enum=_ROLE_ENUM),
                    "name": s.string(),
                    "text": s.string(),
                }
            )
        ),
    },
    required=["messages"],
)


# ---------------------------------------------------------------------------
# Prompt builders
# ---------------------------------------------------------------------------


def build_board_prompt(topic: str, stage: BusinessStage) -> str:
    cfo, cmo, cto = (ADVISOR_NAMES[role] for role in BOARD_ROLES)
    return f"""You are simulating a Board of Directors meeting for a solo founder.
The founder's idea: "{topic}" (Stage: {stage}).

Create 3 distinct personas who argue about this idea from their own domain of expertise.
They must hold CONFLICTING viewpoints and actively critique each other, like a real debate.

1. The CFO ({cfo}): Frugal, risk-averse, obsessed with margins and burn rate. Skeptical of the CMO's spending.
2. The CMO ({cmo}): Viral-obsessed, focused on brand, community and hype. Optimistic but frustrated by the CFO.
3. The CTO ({cto}): Pragmatic, focused on build time, technical feasibility and scalability.

Give each one specific advice, their biggest concern and a vote (Approve/Reject/Pivot).
Return a hex color for 'avatarColor' that matches their vibe (CFO=Green, CMO=Pink, CTO=Blue).
Finally, provide a 1-sentence synthesis of the conflict."""


def build_chat_prompt(meeting: BoardMeeting, question: str) -> str:
    cfo, cmo, cto = (ADVISOR_NAMES[role] for role in BOARD_ROLES)
    return f"""Context: A board meeting between a CFO ({cfo}), CMO ({cmo}) and CTO ({cto}).
Current Board State: {board_stances(meeting)}

The Founder (User) asks: "{question}"

Choose ONE or TWO advisors who would feel most strongly about this question to respond.
They respond IN CHARACTER, referencing their previous stance or arguing with the other advisors if relevant.
Keep each response short and conversational (under {REPLY_WORD_LIMIT} words).

Return the replies as an array of messages."""


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def _role(raw: Any) -> AdvisorRole | None:
    try:
        return AdvisorRole(str(raw).strip().upper())
    except ValueError:
        return None


def normalize_advisors(raw: Any) -> list[dict[str, Any]]:
    """Seat exactly one advisor per role, in CFO/CMO/CTO order.

    Duplicate roles keep the first entry; names and off-pattern colors fall
    back to the roster.

    Raises:
        MalformedResponse: if a role is missing from the reply
    """
    by_role: dict[AdvisorRole, dict[str, Any]] = {}
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict):
            continue
        role = _role(entry.get("role"))
        if role is None or role in by_role:
            continue
        by_role[role] = entry

    missing = [role.value for role in BOARD_ROLES if role not in by_role]
    if missing:
        raise MalformedResponse("board", f"missing advisor role(s): {', '.join(missing)}")

    advisors = []
    for role in BOARD_ROLES:
        entry = by_role[role]
        color = coerce_str(entry.get("avatarColor"))
        if not _HEX_COLOR.match(color):
            color = ADVISOR_COLORS[role]
        advisors.append(
            {
                "role": role.value,
                "name": coerce_str(entry.get("name"), ADVISOR_NAMES[role]),
                "avatarColor": color,
                "advice": coerce_str(entry.get("advice")),
                "concern": coerce_str(entry.get("concern")),
                "verdict": coerce_str(entry.get("verdict")).capitalize(),
            }
        )
    return advisors


# ---------------------------------------------------------------------------
# BoardService
# ---------------------------------------------------------------------------


class BoardService:
    """Board of advisors orchestrator.

    Public API:
        convene(topic, stage) -> BoardMeeting
        ask(meeting, question) -> list[BoardMessage]
    """

    def __init__(self, gateway: Gateway, clock: Callable[[], int] = now_ms):
        self._gateway = gateway
        self._clock = clock

    async def convene(self, topic: str, stage: BusinessStage) -> BoardMeeting:
        reply = await self._gateway.generate_structured(build_board_prompt(topic, stage), BOARD_SCHEMA)
        return BoardMeeting.decode(
            {
                "advisors": normalize_advisors(reply.data.get("advisors")),
                "synthesis": coerce_str(reply.data.get("synthesis")),
                "chatHistory": [],
            },
            feature="board",
        )

    async def ask(self, meeting: BoardMeeting, question: str) -> list[BoardMessage]:
        """Get one or two in-character replies to a founder question.

        Raises:
            ValueError: if question is blank
        """
        question = question.strip()
        if not question:
            raise ValueError("Please enter a question for the board.")

        reply = await self._gateway.generate_structured(build_chat_prompt(meeting, question), CHAT_SCHEMA)
        raw_messages = reply.data.get("messages")

        timestamp = self._clock()
        messages = []
        for entry in raw_messages if isinstance(raw_messages, list) else []:
            if not isinstance(entry, dict):
                continue
            role = _role(entry.get("role"))
            text = coerce_str(entry.get("text"))
            if role is None or not text:
                logger.info("board_reply_dropped", role=entry.get("role"))
                continue
            messages.append(
                BoardMessage(
                    role=role.value,
                    name=meeting.advisor(role).name,
                    text=text,
                    timestamp=timestamp,
                )
            )

        if len(messages) > MAX_REPLIES:
            logger.info("board_replies_truncated", received=len(messages))
        return messages[:MAX_REPLIES]
