# api/routers/chat.py
import logging

import httpx
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from retirewise.api.deps import get_chat_client
from retirewise.core.config import settings
from retirewise.schemas import ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Chat Relay"])


@router.post("/chat", summary="Relay a chat request to the language model")
async def chat(body: ChatRequest, client: httpx.AsyncClient = Depends(get_chat_client)):
    """
    Forward messages, tools and system prompt upstream with the server-held
    credential, so the key never reaches the browser.

    The upstream JSON is returned as-is, with the upstream status code on
    failure. Transport errors come back as `{"error": message}` with 500.
    """
    if not settings.ANTHROPIC_API_KEY:
        logger.error("Chat relay called but ANTHROPIC_API_KEY is not set")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Chat relay is not configured"},
        )

    payload = {
        "model": settings.CHAT_MODEL,
        "max_tokens": settings.CHAT_MAX_TOKENS,
        **body.model_dump(exclude_none=True),
    }
    logger.info("Proxying request to chat API...")

    try:
        response = await client.post(
            settings.ANTHROPIC_API_URL,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "x-api-key": settings.ANTHROPIC_API_KEY,
                "anthropic-version": settings.ANTHROPIC_VERSION,
            },
        )
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Proxy error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    if response.is_error:
        logger.error(f"Chat API error: {response.status_code} {data}")
        return JSONResponse(status_code=response.status_code, content=data)

    return data
