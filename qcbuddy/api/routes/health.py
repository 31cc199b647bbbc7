"""
Health and knowledge inspection endpoints.

Endpoints:
- GET  /health            - service status, generator mode and AI budget
- GET  /debug/knowledge   - chunk count and a small preview
- POST /knowledge/reload  - rescan the knowledge directories
"""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from qcbuddy import __version__
from qcbuddy.api.state import AppState, get_state
from qcbuddy.core.logging import get_logger
from qcbuddy.shared.text_utils import truncate_text

logger = get_logger(__name__)

SERVICE_NAME = "qc-buddy-backend"
PREVIEW_SIZE = 5
PREVIEW_CHARS = 160

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    ok: bool = Field(default=True, description="Service is up")
    service: str = Field(default=SERVICE_NAME)
    version: str = Field(default=__version__)
    gemini: bool = Field(..., description="Generator configured and enabled")
    mode: str = Field(..., description="Generation mode: flash, pro or off")
    maxPerMin: int = Field(..., description="AI calls allowed per minute")
    remaining: int = Field(..., description="AI calls left in the current minute")


class ChunkPreview(BaseModel):
    title: str
    topic: str
    market: str
    textPreview: str


class KnowledgeDebugResponse(BaseModel):
    count: int
    sample: List[ChunkPreview] = Field(default_factory=list)


class ReloadResponse(BaseModel):
    ok: bool = True
    count: int
    skipped: int = 0


@router.get("/health", response_model=HealthResponse)
def health(state: AppState = Depends(get_state)) -> HealthResponse:
    budget = state.budget.snapshot()
    return HealthResponse(
        gemini=state.generation_enabled,
        mode=state.config.llm.mode,
        maxPerMin=budget["maxPerMin"],
        remaining=budget["remaining"],
    )


@router.get("/debug/knowledge", response_model=KnowledgeDebugResponse)
def debug_knowledge(state: AppState = Depends(get_state)) -> KnowledgeDebugResponse:
    sample = [
        ChunkPreview(
            title=chunk.title,
            topic=chunk.topic.value,
            market=chunk.market.value,
            textPreview=truncate_text(chunk.text, PREVIEW_CHARS, suffix=""),
        )
        for chunk in state.store.sample(PREVIEW_SIZE)
    ]
    return KnowledgeDebugResponse(count=len(state.store), sample=sample)


@router.post("/knowledge/reload", response_model=ReloadResponse)
def reload_knowledge(state: AppState = Depends(get_state)) -> ReloadResponse:
    chunks = state.store.reload()
    logger.info("Knowledge reloaded via API", chunks=len(chunks))
    return ReloadResponse(count=len(chunks), skipped=len(state.store.skipped_files))
