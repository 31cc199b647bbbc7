"""
Cuisine tag suggestion for a restaurant menu.

Two paths produce the same TagSuggestion shape:

- suggest_tags(): keyword scoring against tag definitions from tags.json,
  topped up with built-in definitions when the sheet is thin.
- parse_generated_suggestion(): validates a generator's JSON reply with
  pydantic; anything that does not validate returns None so the caller
  can fall back to the keyword path.
"""

import json
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from qcbuddy.core.logging import get_logger
from qcbuddy.core.models import MarketPreference, TagDefinition

logger = get_logger(__name__)

MAX_CUISINE_TAGS = 3
MIN_LOADED_DEFINITIONS = 5

# Upper bounds applied to generated suggestions
GENERATED_LIMITS = {"cuisine_tags": 12, "extra_tags": 12, "reasoning": 8, "notes": 4}

FALLBACK_DEFINITIONS: List[TagDefinition] = [
    TagDefinition("Middle Eastern", ["shawarma", "falafel", "hummus", "kebab", "kofta", "mansaf", "fattoush", "tahini"]),
    TagDefinition("Burgers", ["burger", "cheeseburger", "beef patty", "angus"]),
    TagDefinition("Sandwiches", ["sandwich", "sub", "wrap", "tortilla", "panini"]),
    TagDefinition("Grills", ["grilled", "kebab", "shish", "bbq", "charcoal"]),
    TagDefinition("Chicken", ["chicken", "nuggets", "tenders", "wings"]),
    TagDefinition("Italian", ["pizza", "pasta", "penne", "spaghetti", "lasagna", "margherita"]),
    TagDefinition("Desserts", ["cheesecake", "brownie", "pudding", "tiramisu", "ice cream", "kunafa", "baklava"]),
    TagDefinition("Breakfast", ["pancake", "omelette", "egg", "foul", "fatteh", "manakish"]),
]

NOTE_AE = "UAE: Up to 3 cuisine tags; tags should reflect ~50% of the menu."
NOTE_JO = "Jordan: Don't combine unrelated cuisines together."
NOTE_FAST_FOOD = "Do not use 'Fast Food' unless true mass QSR (McDonald's, Burger King)."

_FENCE = re.compile(r"```(?:json)?|```", re.IGNORECASE)


@dataclass
class TagSuggestion:
    """Suggested tags with the reasoning shown to the user."""

    cuisine_tags: List[str] = field(default_factory=list)
    extra_tags: List[str] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "cuisineTags": list(self.cuisine_tags),
            "extraTags": list(self.extra_tags),
            "reasoning": list(self.reasoning),
            "notes": list(self.notes),
        }


class GeneratedSuggestion(BaseModel):
    """Structural check for a generator's JSON reply."""

    cuisine_tags: List[str] = Field(..., alias="cuisineTags")
    extra_tags: List[str] = Field(default_factory=list, alias="extraTags")
    reasoning: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)

    def to_suggestion(self) -> TagSuggestion:
        limits = GENERATED_LIMITS
        return TagSuggestion(
            cuisine_tags=self.cuisine_tags[: limits["cuisine_tags"]],
            extra_tags=self.extra_tags[: limits["extra_tags"]],
            reasoning=self.reasoning[: limits["reasoning"]],
            notes=self.notes[: limits["notes"]],
        )


def unique_items(items: Iterable[Any]) -> List[str]:
    """Trimmed, non-empty items in first-seen order."""
    seen = set()
    result = []
    for item in items:
        text = str(item or "").strip()
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result


def market_notes(market: Union[str, MarketPreference]) -> List[str]:
    market = MarketPreference.parse(market)
    notes = []
    if market in (MarketPreference.AE, MarketPreference.AUTO):
        notes.append(NOTE_AE)
    if market in (MarketPreference.JO, MarketPreference.AUTO):
        notes.append(NOTE_JO)
    notes.append(NOTE_FAST_FOOD)
    return notes


def score_tags(items: List[str], definitions: List[TagDefinition]) -> List[tuple]:
    """
    Count keyword hits per tag across items.

    Each (keyword, item) pair where the keyword occurs in the item counts
    once. Tags defined more than once accumulate. Returns (tag, hits)
    pairs with hits > 0, highest first; ties keep definition order.
    """
    docs = [item.lower() for item in items]
    scores: Counter = Counter()
    for definition in definitions:
        hits = sum(1 for kw in definition.keywords for doc in docs if kw and kw.lower() in doc)
        if hits:
            scores[definition.tag] += hits
    return scores.most_common()


def suggest_tags(
    items: Iterable[Any],
    market: Union[str, MarketPreference] = MarketPreference.AUTO,
    definitions: Optional[List[TagDefinition]] = None,
) -> TagSuggestion:
    """Keyword-based suggestion of up to three cuisine tags."""
    defs = [d for d in (definitions or []) if d.tag]
    if len(defs) < MIN_LOADED_DEFINITIONS:
        defs.extend(FALLBACK_DEFINITIONS)

    ranked = score_tags(unique_items(items), defs)[:MAX_CUISINE_TAGS]
    return TagSuggestion(
        cuisine_tags=[tag for tag, _ in ranked],
        extra_tags=[],
        reasoning=[f'Detected "{tag}" signals {hits}x across items' for tag, hits in ranked],
        notes=market_notes(market),
    )


def build_tag_prompt(items: List[str], market: Union[str, MarketPreference]) -> str:
    market = MarketPreference.parse(market)
    lines = [
        f"You are QC Buddy. Market: {market.value}.",
        "For the items below, suggest 1-3 concise cuisine tags (lowercase, no emojis).",
        'Return JSON only: {"cuisineTags":["..."],"extraTags":["..."],"reasoning":["..."],"notes":["..."]}',
        "",
        "Items:",
    ]
    lines.extend(f"{i}. {item}" for i, item in enumerate(items, 1))
    return "\n".join(lines)


def parse_generated_suggestion(text: Optional[str]) -> Optional[TagSuggestion]:
    """Validated suggestion from generator output, or None."""
    if not text:
        return None
    payload = _FENCE.sub("", text).strip()
    try:
        data = json.loads(payload)
        return GeneratedSuggestion.model_validate(data).to_suggestion()
    except (json.JSONDecodeError, ValidationError) as e:
        logger.info("Discarding generated tag suggestion", error=str(e)[:200])
        return None
