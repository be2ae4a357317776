"""
Business logic layer
"""

from gemini_bridge.services.chat_service import ChatService, PreparedChatRequest

__all__ = ["ChatService", "PreparedChatRequest"]
