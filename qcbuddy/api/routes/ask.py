"""
Question answering endpoints.

POST /ask (aliases /chat, /api/ask, /api/chat)

    {"message": "...", "market": "AUTO"}  →  {"answer", "sources", "buddyMood"}

An empty message is a 400. Every other request gets an answer: when the
AI budget for the current minute is spent the request is answered offline,
and an unexpected failure yields the refusal answer.
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from qcbuddy.api.state import AppState, get_state
from qcbuddy.core.logging import get_logger
from qcbuddy.query.assembler import REFUSAL_TEXT
from qcbuddy.query.service import MOOD_CONFUSED, AnswerResult

logger = get_logger(__name__)

ASK_PATHS = ("/ask", "/chat", "/api/ask", "/api/chat")

router = APIRouter(tags=["ask"])


class AskRequest(BaseModel):
    message: str = Field(default="", description="Question, or one item per line")
    market: str = Field(default="AUTO", description="AUTO, AE, JO or SA")


class SourceModel(BaseModel):
    title: str
    market: str
    topic: str
    text: str


class AskResponse(BaseModel):
    answer: str
    sources: List[SourceModel] = Field(default_factory=list)
    buddyMood: str


def to_response(result: AnswerResult) -> AskResponse:
    return AskResponse(
        answer=result.answer,
        sources=[SourceModel(**s.to_dict()) for s in result.sources],
        buddyMood=result.mood,
    )


def handle_ask(request: AskRequest, state: AppState = Depends(get_state)):
    message = (request.message or "").strip()
    if not message:
        return JSONResponse(status_code=400, content={"error": "missing_message"})

    force_offline = not state.allow_generation()
    try:
        result = state.service.ask(message, request.market, force_offline=force_offline)
    except Exception as e:
        logger.exception("Ask failed, returning refusal", error=str(e))
        result = AnswerResult(answer=REFUSAL_TEXT, sources=[], mood=MOOD_CONFUSED)
    return to_response(result)


for _path in ASK_PATHS:
    router.add_api_route(_path, handle_ask, methods=["POST"], response_model=AskResponse)
