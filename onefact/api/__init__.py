"""HTTP API routers.

All routers are mounted under ``/api/v1`` by ``onefact.main``.
"""

from onefact.api.chat import router as chat_router
from onefact.api.collection import router as collection_router
from onefact.api.facts import router as facts_router

__all__ = ["chat_router", "collection_router", "facts_router"]
