"""ImageService: infographic synthesis, infographic edits and product mockups.

Every call is a single-image capability call. A reply without inline image
bytes raises EmptyPayload; an empty image is never accepted as a result.
"""

import structlog

from lens.core.exceptions import EmptyPayload
from lens.domain.instructions import mockup_instruction, style_instruction
from lens.gateway.payloads import decode_image
from lens.gateway.protocol import Gateway, InlinePayload, ReferenceImage
from lens.schemas.artifacts import ProductMockup
from lens.schemas.configuration import MockupType, VisualStyle

logger = structlog.get_logger(__name__)


def build_mockup_prompt(topic: str, mockup_type: MockupType, style: VisualStyle) -> str:
    return f"""Create a stunning, professional product visualization for a business about: "{topic}".
Type: {mockup_instruction(mockup_type)}
{style_instruction(style)}

Ensure high resolution, perfect perspective, and no garbled text. Focus on visual impact and brand identity."""


def mockup_caption(topic: str, mockup_type: MockupType) -> str:
    return f"AI Generated {mockup_type} for {topic}"


class ImageService:
    """Image orchestrator.

    Public API:
        generate_infographic(prompt) -> InlinePayload
        edit_infographic(image, instruction) -> InlinePayload
        generate_mockup(topic, mockup_type, style) -> ProductMockup
    """

    def __init__(self, gateway: Gateway):
        self._gateway = gateway

    async def generate_infographic(self, prompt: str) -> InlinePayload:
        return self._require(await self._gateway.generate_image(prompt), "image")

    async def edit_infographic(
        self,
        image: str | bytes,
        instruction: str,
        mime_type: str = "image/png",
    ) -> InlinePayload:
        """Refine an existing infographic.

        Args:
            image: Raw bytes, bare base64, or a data:image/...;base64, URL (prefix is stripped)
            instruction: What to change
            mime_type: Mime type of raw bytes or bare base64 (a data URL carries its own)

        Raises:
            ValueError: if instruction is blank or image is not valid base64
            EmptyPayload: if the reply carries no image
        """
        instruction = instruction.strip()
        if not instruction:
            raise ValueError("Please describe the edit to apply.")
        data, mime_type = decode_image(image, mime_type)
        reference = ReferenceImage(data=data, mime_type=mime_type)
        return self._require(await self._gateway.generate_image(instruction, reference=reference), "edited image")

    async def generate_mockup(self, topic: str, mockup_type: MockupType, style: VisualStyle) -> ProductMockup:
        payload = self._require(
            await self._gateway.generate_image(build_mockup_prompt(topic, mockup_type, style)),
            "mockup",
        )
        return ProductMockup(
            type=mockup_type,
            image_data=payload.data,
            mime_type=payload.mime_type,
            caption=mockup_caption(topic, mockup_type),
        )

    @staticmethod
    def _require(payload: InlinePayload | None, capability: str) -> InlinePayload:
        if payload is None or not payload.data:
            logger.warning("empty_payload", capability=capability)
            raise EmptyPayload(capability)
        return payload
