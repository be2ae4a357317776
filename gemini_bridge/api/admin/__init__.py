"""
Admin API routers
"""

from gemini_bridge.api.admin.kv import router as kv_router

__all__ = ["kv_router"]
