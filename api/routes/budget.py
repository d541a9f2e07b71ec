"""
GET /api/v1/budget endpoint.

Serves the cached budget items.  The first request after startup (or after
an upstream failure) triggers the upstream fetch; concurrent requests share
it.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_cache
from api.models import BudgetItemOut, BudgetResponse, ErrorResponse
from budget.cache import BudgetCache

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get(
    "",
    response_model=BudgetResponse,
    summary="Budget items",
    responses={
        502: {
            "model": ErrorResponse,
            "description": "Upstream budget endpoint failed or returned an unrecognized payload",
        },
    },
)
async def get_budget(cache: BudgetCache = Depends(get_cache)) -> BudgetResponse:
    """Return the budget items in upstream order."""
    items = await cache.fetch_or_get()
    return BudgetResponse(
        count=len(items),
        items=[BudgetItemOut(**item.to_dict()) for item in items],
    )
