"""Gateway Protocol: the single seam between orchestrators and the generative backend.

All Gateway implementations MUST provide these 4 capability calls:
- generate_structured: schema-constrained JSON, optionally with live web grounding
- generate_text: free-form short text
- generate_image: single image synthesis, or an edit when a reference image is given
- generate_speech: text-to-speech narration

Failures surface as AuthorizationFailure (entitlement / billing) or
BackendFailure (everything else); nothing is retried at this layer.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class GroundingCitation:
    title: str
    url: str


@dataclass(frozen=True)
class StructuredReply:
    """Parsed JSON object plus any web-grounding citations from the response metadata."""

    data: dict[str, Any]
    citations: list[GroundingCitation] = field(default_factory=list)


@dataclass(frozen=True)
class InlinePayload:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class ReferenceImage:
    data: bytes
    mime_type: str = "image/png"


@runtime_checkable
class Gateway(Protocol):
    """Protocol for every generative-backend capability used by the orchestrators."""

    async def generate_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        *,
        web_grounding: bool = False,
    ) -> StructuredReply:
        """Request a reply constrained to schema and parse it.

        An empty reply parses as {}. Non-JSON raises MalformedResponse.
        """
        ...

    async def generate_text(self, prompt: str) -> str:
        ...

    async def generate_image(
        self,
        prompt: str,
        reference: ReferenceImage | None = None,
    ) -> InlinePayload | None:
        """Return the first inline image of the reply, or None if it carried none."""
        ...

    async def generate_speech(self, prompt: str, voice: str) -> InlinePayload | None:
        """Return the first inline audio of the reply, or None if it carried none."""
        ...
