"""Marketplace FastAPI application.

Processes commands synchronously via HTTP inside the marketplace domain
context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       -> event_processing = "sync"  (handlers fire after commit)
#   - "production" -> event_processing = "async" (handlers fire via Engine)
from marketplace.api.application import create_app
from marketplace.domain import marketplace
from marketplace.utils.logging import configure_logging

configure_logging()
marketplace.init()

app = create_app()
