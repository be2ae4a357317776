"""
Upstream provider clients
"""

from gemini_bridge.providers.base import ProviderResponse
from gemini_bridge.providers.gemini_client import GeminiClient

__all__ = ["GeminiClient", "ProviderResponse"]
