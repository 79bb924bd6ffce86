"""Tests for ImageService: infographics, edits and mockups."""

import base64

import pytest

from lens.core.exceptions import EmptyPayload
from lens.gateway.fake import FAKE_PNG
from lens.gateway.payloads import to_data_url
from lens.schemas.configuration import MockupType, VisualStyle
from lens.services.image_service import ImageService, build_mockup_prompt

pytestmark = pytest.mark.unit


class TestInfographic:
    @pytest.mark.asyncio
    async def test_generate_returns_inline_image(self, gateway):
        payload = await ImageService(gateway).generate_infographic("Clean isometric infographic")

        assert payload.data == FAKE_PNG
        assert payload.mime_type == "image/png"
        assert gateway.calls_for("image")[0].reference is None

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self, gateway_empty_payload):
        with pytest.raises(EmptyPayload, match="Failed to generate image"):
            await ImageService(gateway_empty_payload).generate_infographic("prompt")


class TestEdit:
    @pytest.mark.asyncio
    async def test_data_url_prefix_stripped_from_reference(self, gateway):
        source = b"\x89PNG source bytes"

        await ImageService(gateway).edit_infographic(to_data_url(source, "image/jpeg"), "Make it dark mode")

        call = gateway.calls_for("image")[0]
        assert call.prompt == "Make it dark mode"
        assert call.reference.data == source
        assert b"data:image" not in call.reference.data
        assert call.reference.mime_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_raw_bytes_keep_given_mime(self, gateway):
        await ImageService(gateway).edit_infographic(b"raw", "Brighter", mime_type="image/webp")

        reference = gateway.calls_for("image")[0].reference
        assert reference.data == b"raw"
        assert reference.mime_type == "image/webp"

    @pytest.mark.asyncio
    async def test_bare_base64(self, gateway):
        await ImageService(gateway).edit_infographic(base64.b64encode(b"raw").decode(), "Brighter")
        assert gateway.calls_for("image")[0].reference.data == b"raw"

    @pytest.mark.asyncio
    async def test_blank_instruction_rejected(self, gateway):
        with pytest.raises(ValueError, match="describe the edit"):
            await ImageService(gateway).edit_infographic(b"raw", "  ")
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self, gateway_empty_payload):
        with pytest.raises(EmptyPayload, match="edited image"):
            await ImageService(gateway_empty_payload).edit_infographic(b"raw", "Brighter")


class TestMockup:
    @pytest.mark.asyncio
    async def test_generate_mockup(self, gateway):
        mockup = await ImageService(gateway).generate_mockup(
            "plant app", MockupType.MOBILE_APP, VisualStyle.TECH_DARK
        )

        assert mockup.type == MockupType.MOBILE_APP
        assert mockup.image_data == FAKE_PNG
        assert mockup.caption == "AI Generated Mobile App for plant app"

    def test_prompt_mentions_topic(self):
        prompt = build_mockup_prompt("plant app", MockupType.SAAS_DASHBOARD, VisualStyle.WHITEBOARD)
        assert '"plant app"' in prompt

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self, gateway_empty_payload):
        with pytest.raises(EmptyPayload, match="mockup"):
            await ImageService(gateway_empty_payload).generate_mockup(
                "plant app", MockupType.MOBILE_APP, VisualStyle.TECH_DARK
            )
