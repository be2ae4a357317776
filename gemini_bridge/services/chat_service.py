"""
Chat Completion Proxy Service

Wires the translators to the upstream Gemini client: translate the OpenAI
request, call Gemini once, translate the reply back.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Iterable

from pydantic import ValidationError as PydanticValidationError

from gemini_bridge.common.errors import UpstreamError, ValidationError
from gemini_bridge.common.sse import DONE_SSE, SSEDecoder, encode_sse_data
from gemini_bridge.common.time import now_seconds
from gemini_bridge.common.translation import (
    gemini_chunk_to_openai_sse,
    gemini_response_to_openai,
    openai_generation_config,
    openai_to_gemini_request,
    safety_settings,
)
from gemini_bridge.common.translation.base import make_error_completion_id
from gemini_bridge.config import get_settings
from gemini_bridge.domain.chat import ChatCompletionRequest
from gemini_bridge.providers.base import ProviderResponse
from gemini_bridge.providers.gemini_client import GeminiClient

logger = logging.getLogger(__name__)


@dataclass
class PreparedChatRequest:
    """An inbound request after translation, ready to send upstream."""

    model: str
    stream: bool
    body: dict[str, Any]


class ChatService:
    """
    Chat Completion Service

    Stateless apart from the upstream client; safe to share across requests.
    """

    def __init__(self, client: GeminiClient):
        self.client = client

    def prepare(self, raw_body: Any) -> PreparedChatRequest:
        """
        Validate the request envelope and translate it into a Gemini body

        Raises:
            ValidationError: The body is not an object or has no model
        """
        if not isinstance(raw_body, dict):
            raise ValidationError(message="Request body must be a JSON object", code="invalid_request")
        try:
            envelope = ChatCompletionRequest.model_validate(raw_body)
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid chat completion request",
                code="invalid_request",
                details={"errors": [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]},
            ) from e

        is_safety_enabled = envelope.is_safety_enabled
        if is_safety_enabled is None:
            is_safety_enabled = get_settings().SAFETY_ENABLED_DEFAULT

        gemini_request = openai_to_gemini_request(
            raw_body,
            requested_model_id=envelope.model,
            is_safety_enabled=is_safety_enabled,
        )
        if gemini_request.skipped:
            logger.info(
                "Skipped %d item(s) while translating request for %s: %s",
                len(gemini_request.skipped),
                envelope.model,
                ", ".join(f"#{s.index}:{s.reason.value}" for s in gemini_request.skipped),
            )

        body = gemini_request.to_dict()
        generation_config = openai_generation_config(raw_body)
        if generation_config:
            body["generationConfig"] = generation_config
        settings = safety_settings(is_safety_enabled)
        if settings:
            body["safetySettings"] = settings

        return PreparedChatRequest(model=envelope.model, stream=envelope.stream, body=body)

    async def complete(self, prepared: PreparedChatRequest) -> str:
        """
        Non-streaming completion

        Returns:
            str: Serialized OpenAI chat completion

        Raises:
            UpstreamError: Gemini returned an error status or was unreachable
        """
        response = await self.client.generate(prepared.model, prepared.body)
        self._log_timing(prepared.model, response, stream=False)
        if not response.is_success:
            raise self._upstream_error(response)
        return gemini_response_to_openai(response.body, prepared.model)

    async def open_stream(self, prepared: PreparedChatRequest) -> AsyncGenerator[str, None]:
        """
        Start a streaming completion

        The upstream call is made before returning, so an upstream error surfaces
        as UpstreamError instead of a broken event stream.

        Returns:
            AsyncGenerator[str, None]: OpenAI SSE blocks, terminated by `data: [DONE]`
        """
        upstream = self.client.stream_generate(prepared.model, prepared.body)
        try:
            first_chunk, response = await upstream.__anext__()
        except StopAsyncIteration:
            first_chunk, response = b"", ProviderResponse(status_code=200)

        if not response.is_success:
            await upstream.aclose()
            raise self._upstream_error(response)

        return self._relay(first_chunk, response, upstream, prepared.model)

    async def _relay(
        self,
        first_chunk: bytes,
        first_response: ProviderResponse,
        upstream: AsyncGenerator[tuple[bytes, ProviderResponse], None],
        model: str,
    ) -> AsyncGenerator[str, None]:
        decoder = SSEDecoder()
        last_response = first_response
        try:
            for block in self._translate_payloads(decoder.feed(first_chunk), model):
                yield block
            async for chunk, response in upstream:
                last_response = response
                if not response.is_success:
                    logger.error("Gemini stream interrupted: %s", response.error_message())
                    yield self._stream_error_chunk(model, response.error_message())
                    break
                for block in self._translate_payloads(decoder.feed(chunk), model):
                    yield block
            for block in self._translate_payloads(decoder.flush(), model):
                yield block
        finally:
            await upstream.aclose()
        self._log_timing(model, last_response, stream=True)
        yield DONE_SSE

    @staticmethod
    def _log_timing(model: str, response: ProviderResponse, stream: bool) -> None:
        logger.debug(
            "Gemini call finished: model=%s stream=%s status=%s ttfb=%sms total=%sms",
            model,
            stream,
            response.status_code,
            response.first_byte_delay_ms,
            response.total_time_ms,
        )

    @staticmethod
    def _translate_payloads(payloads: Iterable[str], model: str) -> Iterable[str]:
        for payload in payloads:
            if not payload or payload.strip() == "[DONE]":
                continue
            try:
                event = json.loads(payload)
            except ValueError:
                logger.warning("Skipping undecodable Gemini stream payload: %s", payload[:200])
                continue
            block = gemini_chunk_to_openai_sse(event, model)
            if block:
                yield block

    @staticmethod
    def _stream_error_chunk(model: str, message: str) -> str:
        return encode_sse_data(
            {
                "id": make_error_completion_id(),
                "object": "chat.completion.chunk",
                "created": now_seconds(),
                "model": model,
                "choices": [
                    {
                        "index": 0,
                        "delta": {"content": f"[Upstream error: {message}]"},
                        "finish_reason": "error",
                    }
                ],
            }
        )

    @staticmethod
    def _upstream_error(response: ProviderResponse) -> UpstreamError:
        message = response.error_message()
        logger.warning("Gemini upstream error (%s): %s", response.status_code, message)
        return UpstreamError(
            message=message,
            status_code=response.status_code,
            details={"upstream_status": response.status_code},
        )
