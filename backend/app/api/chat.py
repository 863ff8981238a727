"""Voice/text assistant chat endpoint."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from backend.app.adapters.llm import LLMError, complete
from backend.app.config import MissingOpenAIKeyError, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

SYSTEM_PROMPT = """You are a helpful voice assistant for the "Kolkata Explorer" app.
Your goal is to help users explore Kolkata, find heritage sites, restaurants, and plan trips.
Keep your responses concise and conversational, suitable for voice output.
Avoid long lists or markdown formatting if possible, as it will be spoken.
If the user asks about the app's features, guide them to the relevant sections (Map, Trip Planner, etc.)."""


class MessagePart(BaseModel):
    text: str | None = None


class ChatMessage(BaseModel):
    """Single history item, either ``{role, content}`` or ``{role, parts: [{text}]}``."""

    role: str = Field(description="Role: 'user', 'assistant' or 'model'")
    content: str | None = Field(default=None, description="Message content")
    parts: list[MessagePart] | None = None

    def text(self) -> str:
        if self.parts and self.parts[0].text:
            return self.parts[0].text
        return self.content or ""


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, description="User's message")
    history: list[ChatMessage] = Field(default=[], description="Previous messages")


class ChatResponse(BaseModel):
    success: bool = True
    reply: str


def build_messages(message: str, history: list[ChatMessage]) -> list[dict[str, Any]]:
    """System prompt, then non-empty history items, then the new message."""
    messages: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    for item in history:
        content = item.text()
        if not content:
            continue
        role = "assistant" if item.role == "model" else item.role
        messages.append({"role": role, "content": content})
    messages.append({"role": "user", "content": message})
    return messages


@router.post("", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """Reply to a message given the conversation so far.

    Raises:
        HTTPException: 500 if the assistant is not configured or the upstream call fails
    """
    try:
        reply = await complete(
            build_messages(request.message, request.history),
            model=get_settings().openai_chat_model,
            temperature=0.7,
            max_tokens=300,
        )
    except MissingOpenAIKeyError as e:
        logger.error("Assistant unavailable: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Assistant is not configured",
        )
    except LLMError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Assistant request failed: {e}",
        )

    return ChatResponse(reply=reply)
