"""Board conversation state carrier.

A question goes through two transitions, each producing a new BoardMeeting:

1. QuestionAsked: the founder's message is appended before the model is called
   (tentative; it stays even if the call later fails).
2. RepliesReceived: the advisors' replies are appended once they arrive.

Neither transition touches existing history entries; history only grows, in
send order, until the meeting itself is replaced.
"""

import json
import time
from dataclasses import dataclass

from lens.schemas.board import BoardMeeting, BoardMessage, SpeakerRole

FOUNDER_NAME = "You"


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class QuestionAsked:
    text: str
    timestamp: int


@dataclass(frozen=True)
class RepliesReceived:
    messages: tuple[BoardMessage, ...]


ConversationEvent = QuestionAsked | RepliesReceived


def apply_event(meeting: BoardMeeting, event: ConversationEvent) -> BoardMeeting:
    """Fold one conversation event into a meeting, returning the new meeting."""
    match event:
        case QuestionAsked(text=text, timestamp=timestamp):
            founder = BoardMessage(role=SpeakerRole.USER, name=FOUNDER_NAME, text=text, timestamp=timestamp)
            appended = [founder]
        case RepliesReceived(messages=messages):
            appended = list(messages)
        case _:
            raise TypeError(f"Unknown conversation event: {event!r}")
    return meeting.model_copy(update={"chat_history": [*meeting.chat_history, *appended]})


def board_stances(meeting: BoardMeeting) -> str:
    """Grounding context for follow-up questions: role and verdict only, never the history."""
    return json.dumps([{"role": a.role.value, "stance": a.verdict.value} for a in meeting.advisors])
