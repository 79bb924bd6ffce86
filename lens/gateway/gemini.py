"""GeminiGateway: google-genai implementation of the Gateway protocol.

Architecture:
- A new genai.Client is built for every call from a freshly resolved API key,
  so a key change in the environment applies to the next call
- Model routing per capability: web-grounded structured calls use the
  text model, other structured/text calls the fast model with thinking off,
  images the image/edit model, speech the TTS model
- SDK failures are classified and re-raised as AuthorizationFailure or
  BackendFailure with the original exception chained; no retries
"""

from collections.abc import Callable
from typing import Any

import structlog
from google import genai
from google.genai import types

from lens.core.config import get_settings, resolve_api_key
from lens.core.exceptions import AuthorizationFailure, BackendFailure
from lens.gateway.classifier import FailureKind, classify_exception
from lens.gateway.payloads import parse_json_object
from lens.gateway.protocol import (
    GroundingCitation,
    InlinePayload,
    ReferenceImage,
    StructuredReply,
)

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[str], Any]

MISSING_KEY_MESSAGE = "No Gemini API key selected. Select a key from a project with billing enabled."


def _default_client_factory(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def extract_citations(response: Any) -> list[GroundingCitation]:
    """Pull web grounding citations (title + uri) from the first candidate's metadata."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    citations = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        title = getattr(web, "title", None)
        if uri and title:
            citations.append(GroundingCitation(title=title, url=uri))
    return citations


def extract_inline_payload(response: Any, default_mime: str) -> InlinePayload | None:
    """Return the first inline binary part of the response, if any."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None)
            if data:
                return InlinePayload(data=data, mime_type=getattr(inline, "mime_type", None) or default_mime)
    return None


class GeminiGateway:
    """Gateway backed by the Gemini API.

    Public API:
        generate_structured(prompt, schema, web_grounding=False) -> StructuredReply
        generate_text(prompt) -> str
        generate_image(prompt, reference=None) -> InlinePayload | None
        generate_speech(prompt, voice) -> InlinePayload | None
    """

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        api_key_resolver: Callable[[], str] | None = None,
    ):
        """Initialize with optional seams for tests.

        Args:
            client_factory: Builds a client from an API key (default: genai.Client)
            api_key_resolver: Returns the current key (default: resolve_api_key)
        """
        self._client_factory = client_factory or _default_client_factory
        self._api_key_resolver = api_key_resolver or resolve_api_key

    async def generate_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        *,
        web_grounding: bool = False,
    ) -> StructuredReply:
        settings = get_settings()
        if web_grounding:
            model = settings.text_model
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
                tools=[types.Tool(google_search=types.GoogleSearch())],
            )
        else:
            model = settings.fast_model
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
                thinking_config=types.ThinkingConfig(thinking_budget=0),
            )

        response = await self._generate("structured", model, prompt, config, web_grounding=web_grounding)
        data = parse_json_object(getattr(response, "text", None))
        citations = extract_citations(response) if web_grounding else []
        return StructuredReply(data=data, citations=citations)

    async def generate_text(self, prompt: str) -> str:
        settings = get_settings()
        config = types.GenerateContentConfig(thinking_config=types.ThinkingConfig(thinking_budget=0))
        response = await self._generate("text", settings.fast_model, prompt, config)
        return (getattr(response, "text", None) or "").strip()

    async def generate_image(
        self,
        prompt: str,
        reference: ReferenceImage | None = None,
    ) -> InlinePayload | None:
        settings = get_settings()
        config = types.GenerateContentConfig(response_modalities=["IMAGE"])
        if reference is None:
            model = settings.image_model
            contents: Any = [types.Part.from_text(text=prompt)]
        else:
            model = settings.edit_model
            contents = [
                types.Part.from_bytes(data=reference.data, mime_type=reference.mime_type),
                types.Part.from_text(text=prompt),
            ]

        response = await self._generate("image", model, contents, config, edit=reference is not None)
        return extract_inline_payload(response, default_mime="image/png")

    async def generate_speech(self, prompt: str, voice: str) -> InlinePayload | None:
        settings = get_settings()
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                ),
            ),
        )
        response = await self._generate("speech", settings.audio_model, [types.Part.from_text(text=prompt)], config)
        return extract_inline_payload(response, default_mime="audio/L16;codec=pcm;rate=24000")

    async def _generate(self, capability: str, model: str, contents: Any, config: Any, **log_context: Any) -> Any:
        api_key = self._api_key_resolver()
        if not api_key:
            logger.warning("gateway_missing_api_key", capability=capability, model=model)
            raise AuthorizationFailure(MISSING_KEY_MESSAGE)

        client = self._client_factory(api_key)
        logger.info("gateway_call", capability=capability, model=model, **log_context)
        try:
            return await client.aio.models.generate_content(model=model, contents=contents, config=config)
        except Exception as e:
            kind = classify_exception(e)
            logger.warning(
                "gateway_call_failed",
                capability=capability,
                model=model,
                failure_kind=kind.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            if kind is FailureKind.AUTHORIZATION:
                raise AuthorizationFailure(str(e)) from e
            raise BackendFailure(str(e)) from e
