"""
Configuration and catalog endpoints
"""
from fastapi import APIRouter, Depends

from rover_shop.catalog import catalog_by_category
from rover_shop.context import AppContext, get_context


router = APIRouter(tags=["config"])


@router.get("/config")
async def get_config(ctx: AppContext = Depends(get_context)):
    """Houses, starting budget and scoring rules"""
    settings = ctx.settings
    return {
        "houses": settings.houses,
        "starting_budget": settings.starting_budget,
        "default_grade": settings.default_grade,
        "max_team_name_length": settings.max_team_name_length,
        "sell_rate": settings.sell_rate,
        "scoring": settings.scoring.model_dump(),
        "score_limits": {
            "rover_build_score": 20,
            "coding_score": 25,
            "core_values_score": 10,
        },
    }


@router.get("/catalog")
async def get_catalog():
    """Parts grouped by category"""
    return {"categories": catalog_by_category()}
