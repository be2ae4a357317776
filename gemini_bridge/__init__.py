"""
Gemini Bridge

OpenAI-compatible proxy that translates Chat Completions traffic to and from the Google Gemini API.
"""

__version__ = "0.1.0"
