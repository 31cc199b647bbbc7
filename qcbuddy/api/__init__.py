"""
HTTP API for QC Buddy (FastAPI).

Endpoints:
- GET  /health
- GET  /debug/knowledge
- POST /knowledge/reload
- POST /ask, /chat, /api/ask, /api/chat
- POST /suggest-tags
"""

from qcbuddy.api.main import create_app, run_server

__all__ = ["create_app", "run_server"]
