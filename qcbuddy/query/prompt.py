"""
Grounded prompt construction.

The prompt restricts generation to the supplied SOP facts and fixes the
refusal wording. Each source is rendered as one line:

    • <title> [<market>/<topic>]: <normalized text>
"""

import json
import re
from typing import Any, List, Sequence, Union

from qcbuddy.core.models import KnowledgeChunk, MarketPreference
from qcbuddy.query.assembler import REFUSAL_TEXT
from qcbuddy.shared.text_utils import strip_meta_refs, truncate_text

MAX_PROMPT_SOURCES = 3
CONTEXT_CHARS = 1200

_CODE_FENCE = re.compile(r"```[\s\S]*?```")

PROMPT_TEMPLATE = """You are QC Buddy. Answer ONLY using the SOP facts below.
Output rules:
- 1-3 SHORT bullet points (max).
- DO NOT print lists, sections or JSON.
- If not covered, reply exactly: "{refusal}"

Market: {market}
Question: {question}

SOP facts:
{facts}"""


def _leaves(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [leaf for item in value for leaf in _leaves(item)]
    if isinstance(value, dict):
        return [leaf for item in value.values() for leaf in _leaves(item)]
    return []


def normalize_context_text(text: str, max_chars: int = CONTEXT_CHARS) -> str:
    """
    Flatten a chunk text into one plain line for the prompt.

    Code fences are removed, an embedded JSON document is replaced by its
    string leaves joined with " • ", slide/page/file references are
    stripped, whitespace is collapsed and the result is capped.
    """
    if not text:
        return ""
    text = _CODE_FENCE.sub("", str(text))

    stripped = text.strip()
    if (stripped.startswith("{") and stripped.endswith("}")) or (
        stripped.startswith("[") and stripped.endswith("]")
    ):
        try:
            text = " • ".join(_leaves(json.loads(stripped)))
        except json.JSONDecodeError:
            pass

    return truncate_text(strip_meta_refs(text), max_chars)


def render_source(chunk: KnowledgeChunk, index: int, max_chars: int = CONTEXT_CHARS) -> str:
    title = chunk.title or f"Source {index}"
    body = normalize_context_text(chunk.text, max_chars)
    return f"• {title} [{chunk.market.value}/{chunk.topic.value}]: {body}"


def build_grounded_prompt(
    question: str,
    market: Union[str, MarketPreference],
    sources: Sequence[KnowledgeChunk],
    max_chars: int = CONTEXT_CHARS,
) -> str:
    """Instruction + context block for the generation step."""
    facts = "\n".join(
        render_source(chunk, i, max_chars)
        for i, chunk in enumerate(sources[:MAX_PROMPT_SOURCES], 1)
    )
    return PROMPT_TEMPLATE.format(
        refusal=REFUSAL_TEXT,
        market=MarketPreference.parse(market).value,
        question=(question or "").strip(),
        facts=facts,
    ).strip()
