"""
Upstream Provider Response

Encapsulates response information from the upstream provider.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ProviderResponse:
    """
    Provider Response Data Class

    Transport failures are reported through `status_code` and `error` rather than raised.
    """

    # HTTP status code
    status_code: int
    # Response headers
    headers: dict[str, str] = field(default_factory=dict)
    # Response body
    body: Any = None
    # Time to first byte (ms)
    first_byte_delay_ms: Optional[int] = None
    # Total time (ms)
    total_time_ms: Optional[int] = None
    # Error message
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Whether the response is successful"""
        return 200 <= self.status_code < 400

    def error_message(self) -> str:
        """Best-effort human readable reason for a failed response"""
        body = self.body
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8", errors="ignore")
        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict) and isinstance(err.get("message"), str):
                return err["message"]
        if self.error:
            return self.error
        if isinstance(body, str) and body:
            return body
        return f"Upstream returned status {self.status_code}"
