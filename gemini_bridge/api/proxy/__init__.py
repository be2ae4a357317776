"""
Proxy API routers
"""

from gemini_bridge.api.proxy.openai import router as openai_router

__all__ = ["openai_router"]
