"""Per-app objects shared by the route handlers."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from qcbuddy.api.middleware.rate_limiter import CallBudget
from qcbuddy.core.config import Config
from qcbuddy.llm.base import LLMClient
from qcbuddy.query.service import AnswerService
from qcbuddy.storage.knowledge_store import KnowledgeStore


@dataclass
class AppState:
    config: Config
    store: KnowledgeStore
    service: AnswerService
    budget: CallBudget
    generator: Optional[LLMClient] = None

    @property
    def generation_enabled(self) -> bool:
        return self.generator is not None and self.generator.is_available()

    def allow_generation(self) -> bool:
        """True if this request may call the generator (consumes budget)."""
        return self.generation_enabled and self.budget.try_acquire()


def get_state(request: Request) -> AppState:
    """FastAPI dependency returning the app's shared state."""
    return request.app.state.qc
