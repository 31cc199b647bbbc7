"""
Cuisine tag suggestion endpoint.

POST /suggest-tags  {"items": [...], "market": "AUTO"}

The generator is asked first when enabled and within budget; its reply
must validate as a suggestion, otherwise the keyword suggester answers.
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from qcbuddy.api.state import AppState, get_state
from qcbuddy.core.exceptions import LLMError
from qcbuddy.core.logging import get_logger
from qcbuddy.enrichment.tag_suggester import (
    TagSuggestion,
    build_tag_prompt,
    parse_generated_suggestion,
    suggest_tags,
    unique_items,
)

logger = get_logger(__name__)

router = APIRouter(tags=["tags"])


class SuggestTagsRequest(BaseModel):
    items: List[str] = Field(default_factory=list, description="Menu item names")
    market: str = Field(default="AUTO")


class SuggestTagsResponse(BaseModel):
    cuisineTags: List[str] = Field(default_factory=list)
    extraTags: List[str] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)


def _generated(state: AppState, items: List[str], market: str):
    if not state.allow_generation():
        return None
    try:
        reply = state.generator.generate(build_tag_prompt(items, market))
    except LLMError as e:
        logger.info("Tag generation failed, using keyword suggester", error=str(e))
        return None
    return parse_generated_suggestion(reply)


@router.post("/suggest-tags", response_model=SuggestTagsResponse)
def suggest(request: SuggestTagsRequest, state: AppState = Depends(get_state)):
    items = unique_items(request.items)
    if not items:
        empty = TagSuggestion(notes=["No items provided."])
        return JSONResponse(status_code=400, content=empty.to_dict())

    suggestion = _generated(state, items, request.market)
    if suggestion is None:
        definitions = state.store.load_tag_definitions()["cuisine"]
        suggestion = suggest_tags(items, request.market, definitions)
    return SuggestTagsResponse(**suggestion.to_dict())
