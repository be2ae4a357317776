"""
OpenAI Proxy API

Provides the OpenAI-compatible chat completions endpoint backed by Gemini.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse

from gemini_bridge.api.deps import ChatServiceDep
from gemini_bridge.common.errors import AppError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Proxy - OpenAI"])


@router.post("/v1/chat/completions")
async def chat_completions(request: Request, service: ChatServiceDep):
    """
    OpenAI Chat Completions API

    Streams `text/event-stream` when `stream` is true, otherwise returns one chat.completion object.
    """
    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError(message="Request body must be valid JSON", code="invalid_json") from e

        prepared = service.prepare(body)

        if prepared.stream:
            stream_gen = await service.open_stream(prepared)
            return StreamingResponse(
                stream_gen,
                media_type="text/event-stream",
                headers={"Cache-Control": "no-cache"},
            )

        content = await service.complete(prepared)
        return Response(content=content, media_type="application/json")

    except AppError as e:
        return JSONResponse(content=e.to_dict(), status_code=e.status_code)
    except Exception as e:
        # Unexpected errors return 500
        logger.error("Unexpected error: %s", str(e), exc_info=True)
        return JSONResponse(
            content={
                "error": {
                    "message": "Internal server error",
                    "type": "internal_error",
                    "code": "internal_error",
                }
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
