"""Read-only survey content for clients: roles, icons, tie-breaker candidates, example project."""
# app/routers/catalog.py
from fastapi import APIRouter

from src.credit.catalog import (
    CREDIT_ROLES,
    ICON_SET,
    TIE_BREAKER_ROLES,
    ContributorExample,
    CreditRole,
    IconItem,
    TieBreakerRole,
    contributor_example,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/roles", response_model=list[CreditRole])
async def list_roles():
    """The 14 CRediT roles in flashcard order."""
    return CREDIT_ROLES


@router.get("/icons", response_model=list[IconItem])
async def list_icons():
    return ICON_SET


@router.get("/tie-breaker", response_model=list[TieBreakerRole])
async def list_tie_breaker_roles():
    return TIE_BREAKER_ROLES


@router.get("/contributor-example", response_model=list[ContributorExample])
async def get_contributor_example():
    return contributor_example()
