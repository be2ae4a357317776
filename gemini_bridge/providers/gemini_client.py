"""
Google Gemini Native API Client

Forwards translated request bodies to `generateContent` / `streamGenerateContent`.
Failed calls are returned, never retried.
"""

import json
import logging
from typing import Any, AsyncGenerator, Optional
from urllib.parse import quote

import httpx

from gemini_bridge.common.timer import Timer
from gemini_bridge.config import get_settings
from gemini_bridge.providers.base import ProviderResponse

logger = logging.getLogger(__name__)


class GeminiClient:
    """Google Gemini native API client."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.timeout = timeout or settings.HTTP_TIMEOUT

    def _prepare_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers

    @staticmethod
    def build_path(model: str, stream: bool) -> str:
        suffix = "streamGenerateContent?alt=sse" if stream else "generateContent"
        # The model id is one path segment
        return f"/v1beta/models/{quote(model, safe='')}:{suffix}"

    def _build_url(self, path: str) -> str:
        cleaned_base = self.base_url.rstrip("/")
        cleaned_path = path if path.startswith("/") else f"/{path}"
        return f"{cleaned_base}{cleaned_path}"

    async def generate(self, model: str, body: dict[str, Any]) -> ProviderResponse:
        """
        Call `generateContent`

        Args:
            model: Gemini model id (encoded in the URL path)
            body: Gemini request body

        Returns:
            ProviderResponse: Parsed JSON body on success; timeouts map to 504, transport errors to 502
        """
        url = self._build_url(self.build_path(model, stream=False))

        logger.debug("Gemini Request: url=%s body=%s", url, json.dumps(body, ensure_ascii=False))

        timer = Timer().start()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method="POST",
                    url=url,
                    headers=self._prepare_headers(),
                    json=body,
                )

                timer.mark_first_byte()

                response_body: Any = response.text
                try:
                    response_body = response.json()
                except json.JSONDecodeError:
                    pass

                timer.stop()

                return ProviderResponse(
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    body=response_body,
                    first_byte_delay_ms=timer.first_byte_delay_ms,
                    total_time_ms=timer.total_time_ms,
                )

        except httpx.TimeoutException as e:
            timer.stop()
            return ProviderResponse(
                status_code=504,
                error=f"Request timeout: {str(e)}",
                first_byte_delay_ms=timer.first_byte_delay_ms,
                total_time_ms=timer.total_time_ms,
            )

        except httpx.RequestError as e:
            timer.stop()
            return ProviderResponse(
                status_code=502,
                error=f"Request error: {str(e)}",
                first_byte_delay_ms=timer.first_byte_delay_ms,
                total_time_ms=timer.total_time_ms,
            )

    async def stream_generate(
        self, model: str, body: dict[str, Any]
    ) -> AsyncGenerator[tuple[bytes, ProviderResponse], None]:
        """
        Call `streamGenerateContent?alt=sse`

        Yields:
            tuple[bytes, ProviderResponse]: (Data chunk, Response info). An error status
            yields the whole error body once and stops.
        """
        url = self._build_url(self.build_path(model, stream=True))

        logger.debug("Gemini Stream Request: url=%s body=%s", url, json.dumps(body, ensure_ascii=False))

        timer = Timer().start()
        first_chunk = True

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                async with client.stream(
                    method="POST",
                    url=url,
                    headers=self._prepare_headers(),
                    json=body,
                ) as response:
                    provider_response = ProviderResponse(
                        status_code=response.status_code,
                        headers=dict(response.headers),
                    )

                    if response.status_code >= 400:
                        body_bytes = await response.aread()
                        timer.mark_first_byte()
                        timer.stop()
                        provider_response.first_byte_delay_ms = timer.first_byte_delay_ms
                        provider_response.total_time_ms = timer.total_time_ms
                        try:
                            provider_response.body = json.loads(body_bytes)
                        except ValueError:
                            provider_response.body = body_bytes
                        reason = response.reason_phrase or "Upstream error"
                        provider_response.error = f"{response.status_code} {reason}"
                        yield body_bytes or b"", provider_response
                        return

                    async for chunk in response.aiter_bytes():
                        if first_chunk:
                            timer.mark_first_byte()
                            provider_response.first_byte_delay_ms = timer.first_byte_delay_ms
                            first_chunk = False

                        yield chunk, provider_response

                    timer.stop()
                    provider_response.total_time_ms = timer.total_time_ms

        except httpx.TimeoutException as e:
            timer.stop()
            yield b"", ProviderResponse(
                status_code=504,
                error=f"Request timeout: {str(e)}",
                first_byte_delay_ms=timer.first_byte_delay_ms,
                total_time_ms=timer.total_time_ms,
            )

        except httpx.RequestError as e:
            timer.stop()
            yield b"", ProviderResponse(
                status_code=502,
                error=f"Request error: {str(e)}",
                first_byte_delay_ms=timer.first_byte_delay_ms,
                total_time_ms=timer.total_time_ms,
            )
