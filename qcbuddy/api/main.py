"""
QC Buddy HTTP API.

    app = create_app()                      # config from config.yaml + env
    app = create_app(config, store=store)   # tests inject collaborators

Every collaborator is built once per app and kept on ``app.state.qc``.
"""

from typing import Optional

import uvicorn
from fastapi import FastAPI

from qcbuddy import __version__
from qcbuddy.api.middleware.rate_limiter import CallBudget
from qcbuddy.api.routes import ask_router, health_router, tags_router
from qcbuddy.api.state import AppState
from qcbuddy.core.config import Config, load_config
from qcbuddy.core.logging import get_logger
from qcbuddy.llm import create_llm_client
from qcbuddy.llm.base import LLMClient
from qcbuddy.query.service import AnswerService
from qcbuddy.storage.knowledge_store import KnowledgeStore

logger = get_logger(__name__)

_UNSET = object()


def create_app(
    config: Optional[Config] = None,
    store: Optional[KnowledgeStore] = None,
    generator=_UNSET,
    budget: Optional[CallBudget] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Loaded configuration (defaults to load_config()).
        store: Knowledge store (defaults to one over config.knowledge_paths).
        generator: LLM client; pass None to run offline. Defaults to the
            client built from config.llm.
        budget: AI call budget (defaults to config.api.max_ai_calls_per_min).
    """
    config = config or load_config()
    if store is None:
        store = KnowledgeStore(config)
    if generator is _UNSET:
        generator = create_llm_client(config)
    if budget is None:
        budget = CallBudget(config.api.max_ai_calls_per_min)

    llm: Optional[LLMClient] = generator
    app = FastAPI(title="QC Buddy API", version=__version__)
    app.state.qc = AppState(
        config=config,
        store=store,
        service=AnswerService(store, config, generator=llm),
        budget=budget,
        generator=llm,
    )
    app.include_router(health_router)
    app.include_router(ask_router)
    app.include_router(tags_router)

    logger.info(
        "API ready",
        gemini=app.state.qc.generation_enabled,
        mode=config.llm.mode,
        max_per_min=budget.max_per_minute,
    )
    return app


def run_server(config: Optional[Config] = None, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API with uvicorn (blocking)."""
    config = config or load_config()
    app = create_app(config)
    # Load up front so the first request does not pay for the scan
    app.state.qc.store.load()
    uvicorn.run(
        app,
        host=host or config.api.host,
        port=port or config.api.port,
        log_level="info",
    )
