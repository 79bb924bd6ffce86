"""Tests for GeminiGateway using an injected client double.

The client factory hands back a stand-in whose aio.models.generate_content
is an AsyncMock returning SimpleNamespace responses shaped like the SDK's.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from lens.core.config import get_settings
from lens.core.exceptions import AuthorizationFailure, BackendFailure, MalformedResponse
from lens.gateway.gemini import GeminiGateway, extract_citations, extract_inline_payload
from lens.gateway.protocol import GroundingCitation, InlinePayload, ReferenceImage

pytestmark = pytest.mark.unit

SCHEMA = {"type": "OBJECT", "properties": {"score": {"type": "NUMBER"}}}


def _text_response(text: str, chunks: list | None = None) -> SimpleNamespace:
    metadata = SimpleNamespace(grounding_chunks=chunks or [])
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata, content=None)])


def _inline_response(data: bytes | None, mime_type: str | None) -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type) if data else None)
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def _chunk(title: str | None, uri: str | None) -> SimpleNamespace:
    return SimpleNamespace(web=SimpleNamespace(title=title, uri=uri))


class ClientRecorder:
    """Client factory double that records every key it was asked for."""

    def __init__(self, response=None, error: Exception | None = None):
        self.generate_content = AsyncMock(return_value=response, side_effect=error)
        self.keys: list[str] = []

    def __call__(self, api_key: str) -> SimpleNamespace:
        self.keys.append(api_key)
        return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=self.generate_content)))

    @property
    def last_kwargs(self) -> dict:
        return self.generate_content.await_args.kwargs


def _gateway(recorder: ClientRecorder, key: str = "test-key") -> GeminiGateway:
    return GeminiGateway(client_factory=recorder, api_key_resolver=lambda: key)


# ---------------------------------------------------------------------------
# Structured
# ---------------------------------------------------------------------------


class TestStructured:
    @pytest.mark.asyncio
    async def test_parses_json_with_fast_model(self):
        recorder = ClientRecorder(_text_response('{"score": 72}'))

        reply = await _gateway(recorder).generate_structured("prompt", SCHEMA)

        assert reply.data == {"score": 72}
        assert reply.citations == []
        assert recorder.last_kwargs["model"] == get_settings().fast_model
        assert recorder.last_kwargs["config"].response_mime_type == "application/json"
        assert recorder.last_kwargs["config"].tools is None

    @pytest.mark.asyncio
    async def test_web_grounding_uses_text_model_and_extracts_citations(self):
        chunks = [_chunk("Market Report", "https://example.com/a"), _chunk(None, "https://example.com/b")]
        recorder = ClientRecorder(_text_response('```json\n{"score": 1}\n```', chunks))

        reply = await _gateway(recorder).generate_structured("prompt", SCHEMA, web_grounding=True)

        assert reply.data == {"score": 1}
        assert reply.citations == [GroundingCitation(title="Market Report", url="https://example.com/a")]
        assert recorder.last_kwargs["model"] == get_settings().text_model
        assert recorder.last_kwargs["config"].tools

    @pytest.mark.asyncio
    async def test_empty_text_parses_as_empty_object(self):
        recorder = ClientRecorder(_text_response(""))
        reply = await _gateway(recorder).generate_structured("prompt", SCHEMA)
        assert reply.data == {}

    @pytest.mark.asyncio
    async def test_non_json_is_malformed(self):
        recorder = ClientRecorder(_text_response("Sorry, I cannot help with that."))
        with pytest.raises(MalformedResponse):
            await _gateway(recorder).generate_structured("prompt", SCHEMA)


# ---------------------------------------------------------------------------
# Text, image, speech
# ---------------------------------------------------------------------------


class TestOtherCapabilities:
    @pytest.mark.asyncio
    async def test_text_is_stripped(self):
        recorder = ClientRecorder(_text_response("  A sharper idea.  \n"))
        assert await _gateway(recorder).generate_text("prompt") == "A sharper idea."

    @pytest.mark.asyncio
    async def test_image_generation_uses_image_model(self):
        recorder = ClientRecorder(_inline_response(b"png-bytes", "image/png"))

        payload = await _gateway(recorder).generate_image("draw it")

        assert payload == InlinePayload(data=b"png-bytes", mime_type="image/png")
        assert recorder.last_kwargs["model"] == get_settings().image_model
        assert len(recorder.last_kwargs["contents"]) == 1

    @pytest.mark.asyncio
    async def test_edit_sends_reference_before_instruction(self):
        recorder = ClientRecorder(_inline_response(b"edited", "image/png"))

        await _gateway(recorder).generate_image("make it blue", ReferenceImage(data=b"source", mime_type="image/jpeg"))

        contents = recorder.last_kwargs["contents"]
        assert recorder.last_kwargs["model"] == get_settings().edit_model
        assert contents[0].inline_data.data == b"source"
        assert contents[0].inline_data.mime_type == "image/jpeg"
        assert contents[1].text == "make it blue"

    @pytest.mark.asyncio
    async def test_image_without_inline_data_is_none(self):
        recorder = ClientRecorder(_inline_response(None, None))
        assert await _gateway(recorder).generate_image("draw it") is None

    @pytest.mark.asyncio
    async def test_speech_uses_voice_and_default_mime(self):
        recorder = ClientRecorder(_inline_response(b"\x00\x01", None))

        payload = await _gateway(recorder).generate_speech("read this", "Kore")

        assert payload.mime_type == "audio/L16;codec=pcm;rate=24000"
        config = recorder.last_kwargs["config"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"
        assert recorder.last_kwargs["model"] == get_settings().audio_model


# ---------------------------------------------------------------------------
# Keys and failures
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.asyncio
    async def test_missing_key_is_authorization_failure(self):
        recorder = ClientRecorder(_text_response("{}"))

        with pytest.raises(AuthorizationFailure):
            await _gateway(recorder, key="").generate_text("prompt")

        assert recorder.keys == []

    @pytest.mark.asyncio
    async def test_new_client_per_call_with_fresh_key(self):
        keys = iter(["first-key", "second-key"])
        recorder = ClientRecorder(_text_response("ok"))
        gateway = GeminiGateway(client_factory=recorder, api_key_resolver=lambda: next(keys))

        await gateway.generate_text("one")
        await gateway.generate_text("two")

        assert recorder.keys == ["first-key", "second-key"]

    @pytest.mark.asyncio
    async def test_permission_denied_maps_to_authorization_failure(self):
        error = RuntimeError("403 PERMISSION_DENIED")
        recorder = ClientRecorder(error=error)

        with pytest.raises(AuthorizationFailure) as exc_info:
            await _gateway(recorder).generate_text("prompt")

        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_not_found_entity_maps_to_authorization_failure(self):
        recorder = ClientRecorder(error=RuntimeError("Requested entity was not found."))
        with pytest.raises(AuthorizationFailure):
            await _gateway(recorder).generate_image("draw it")

    @pytest.mark.asyncio
    async def test_other_errors_map_to_backend_failure(self):
        recorder = ClientRecorder(error=RuntimeError("503 UNAVAILABLE"))

        with pytest.raises(BackendFailure):
            await _gateway(recorder).generate_structured("prompt", SCHEMA)

        assert recorder.generate_content.await_count == 1


def test_extract_helpers_tolerate_missing_candidates():
    empty = SimpleNamespace(candidates=None)
    assert extract_citations(empty) == []
    assert extract_inline_payload(empty, "image/png") is None
