"""Fact serving and admin endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from onefact.api.dependencies import get_fact_service
from onefact.api.schemas import CategoryList, FactCreate, FactList, FactUpdate
from onefact.services.collector.base import ProcessedFact
from onefact.services.facts import FactService

router = APIRouter(prefix="/facts", tags=["facts"])

Service = Annotated[FactService, Depends(get_fact_service)]
Limit = Annotated[int, Query(ge=1, le=100)]
Skip = Annotated[int, Query(ge=0)]


@router.get("/daily", response_model=ProcessedFact)
async def daily_fact(service: Service, category: str | None = None) -> ProcessedFact:
    """Get the fact of the day, optionally within a category."""
    return await service.find_daily_fact(category or None)


@router.get("/random", response_model=ProcessedFact)
async def random_fact(service: Service, category: str | None = None) -> ProcessedFact:
    """Get a random fact, preferring ones not served in the last day."""
    return await service.find_random_fact(category or None)


@router.get("/categories", response_model=CategoryList)
async def list_categories(service: Service) -> CategoryList:
    return CategoryList(categories=await service.categories())


@router.get("/search", response_model=FactList)
async def search_facts(
    service: Service,
    q: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    limit: Limit = 20,
    skip: Skip = 0,
) -> FactList:
    """Search verified facts by text, category and tag."""
    facts = await service.search_facts(q, category=category, tag=tag, limit=limit, skip=skip)
    return FactList(facts=facts, count=len(facts))


@router.get("/category/{category}", response_model=FactList)
async def facts_by_category(
    category: str,
    service: Service,
    limit: Limit = 20,
    skip: Skip = 0,
) -> FactList:
    facts = await service.list_by_category(category, limit=limit, skip=skip)
    return FactList(facts=facts, count=len(facts))


@router.get("/{fact_id}", response_model=ProcessedFact)
async def get_fact(fact_id: str, service: Service) -> ProcessedFact:
    return await service.get_fact(fact_id)


# ============================================
# Admin
# ============================================


@router.post("", response_model=ProcessedFact, status_code=status.HTTP_201_CREATED)
async def create_fact(body: FactCreate, service: Service) -> ProcessedFact:
    """Create a verified fact manually."""
    return await service.create_fact(**body.model_dump())


@router.put("/{fact_id}", response_model=ProcessedFact)
async def update_fact(fact_id: str, body: FactUpdate, service: Service) -> ProcessedFact:
    return await service.update_fact(fact_id, body.model_dump(exclude_unset=True))


@router.delete("/{fact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fact(fact_id: str, service: Service) -> None:
    await service.delete_fact(fact_id)
