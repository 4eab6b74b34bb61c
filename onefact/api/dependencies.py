"""FastAPI dependencies resolving services from the application container.

The container is created in the application lifespan and stored on
``app.state.container``. Tests override these functions with
``app.dependency_overrides``.
"""

from fastapi import Request

from onefact.core.container import ApplicationContainer
from onefact.services.chat import FactChatService
from onefact.services.facts import FactService
from onefact.workers.scheduler import CollectionScheduler


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_fact_service(request: Request) -> FactService:
    return get_container(request).fact_service()


def get_chat_service(request: Request) -> FactChatService:
    return get_container(request).chat_service()


def get_scheduler(request: Request) -> CollectionScheduler:
    return get_container(request).scheduler()


__all__ = ["get_chat_service", "get_container", "get_fact_service", "get_scheduler"]
