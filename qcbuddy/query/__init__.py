"""
Query Processing for QC Buddy.

    ┌───────────────┐     ┌───────────────┐     ┌───────────────┐
    │   Question    │────→│    Ranker     │────→│   Assembler   │
    │ + market pref │     │ (all chunks)  │     │ ≤3 lines + 3  │
    └───────────────┘     └───────────────┘     │    sources    │
                                                └───────┬───────┘
    ┌───────────────┐     ┌───────────────┐             │
    │ AnswerResult  │←────│   Sanitizer   │←────  grounded prompt
    │ answer/mood   │     │               │       → generator (optional)
    └───────────────┘     └───────────────┘

Public API
----------
    build_answer(question, chunks, market)          synthesized answer + sources
    build_grounded_prompt(question, market, sources) prompt for the generator
    AnswerService(store, config, generator).ask(message, market, force_offline)
"""

from qcbuddy.query.assembler import REFUSAL_TEXT, Answer, build_answer
from qcbuddy.query.prompt import build_grounded_prompt, normalize_context_text
from qcbuddy.query.sanitizer import clean_answer, sanitize_answer, strip_reference_lines
from qcbuddy.query.service import AnswerResult, AnswerService

__all__ = [
    "REFUSAL_TEXT",
    "Answer",
    "AnswerResult",
    "AnswerService",
    "build_answer",
    "build_grounded_prompt",
    "normalize_context_text",
    "clean_answer",
    "sanitize_answer",
    "strip_reference_lines",
]
