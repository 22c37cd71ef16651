"""
Team endpoints: login, shop, inventory, my items, submit
"""
import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from rover_shop.context import AppContext, get_context
from rover_shop.core import cart
from rover_shop.core.scoring import kb_bonus
from rover_shop.models import TeamDocument, TeamProfile
from rover_shop.services.team_registry import InvalidTeam, TeamNotActive


router = APIRouter(prefix="/teams", tags=["teams"])
logger = logging.getLogger(__name__)


async def _load_team(ctx: AppContext, team_id: str) -> TeamDocument:
    team = await ctx.teams.get_team(team_id)
    if team is None:
        raise HTTPException(status_code=404, detail=f"Team {team_id} not found")
    return team


async def _save_team(ctx: AppContext, team_id: str, profile: TeamProfile) -> TeamDocument:
    try:
        return await ctx.teams.update_team(team_id, profile)
    except TeamNotActive as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _parse_selection(payload: dict) -> Dict[str, int]:
    selection = payload.get("items")
    if not isinstance(selection, dict) or not selection:
        raise HTTPException(status_code=400, detail="items required as {partId: quantity}")
    for part_id, quantity in selection.items():
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise HTTPException(status_code=400, detail=f"Quantity for {part_id} must be an integer")
    return selection


def _over_budget(team: TeamDocument) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "error": "over_budget",
            "remaining": cart.remaining_budget(team),
            "message": "Too much! Take things out of the cart first."
        }
    )


@router.post("")
async def create_team(payload: dict, ctx: AppContext = Depends(get_context)):
    """
    Login screen: pick a house and name a team

    Request:
        {"house": "Lynx", "teamName": "Red Rovers", "grade": 1}
    """
    house = payload.get("house")
    team_name = payload.get("teamName") or payload.get("team_name")
    grade = payload.get("grade")
    if not house or not team_name:
        raise HTTPException(status_code=400, detail="house and teamName are required")
    if grade is not None and (isinstance(grade, bool) or not isinstance(grade, int)):
        raise HTTPException(status_code=400, detail="grade must be an integer")

    try:
        team = await ctx.teams.create_team(house, team_name, grade)
    except InvalidTeam as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {"teamId": team.id, "profile": team.to_record()}


@router.get("/{team_id}")
async def get_team(team_id: str, ctx: AppContext = Depends(get_context)):
    team = await _load_team(ctx, team_id)
    return team.to_record()


@router.get("/{team_id}/dashboard")
async def dashboard(team_id: str, ctx: AppContext = Depends(get_context)):
    """Budget, bonus preview and item counts"""
    team = await _load_team(ctx, team_id)
    return {
        "teamId": team.id,
        "teamName": team.team_name,
        "house": team.house,
        "budget": team.budget,
        "spent": team.spent,
        "remaining": cart.remaining_budget(team),
        "bonusPoints": kb_bonus(team.budget, ctx.settings.scoring),
        "cartCount": sum(item.quantity for item in team.cart),
        "ownedCount": sum(item.quantity for item in team.owned_items),
        "canSubmit": cart.can_checkout(team),
    }


@router.post("/{team_id}/cart/preview")
async def preview_cart(team_id: str, payload: dict, ctx: AppContext = Depends(get_context)):
    """Shop screen: cost of a pending selection before adding it"""
    team = await _load_team(ctx, team_id)
    try:
        items = cart.build_cart_items(_parse_selection(payload))
    except cart.UnknownPart as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    preview = cart.preview_selection(team, items)
    return {
        "selectionCost": preview["selection_cost"],
        "remaining": preview["remaining"],
        "canAfford": preview["can_afford"],
    }


@router.post("/{team_id}/cart")
async def add_to_cart(team_id: str, payload: dict, ctx: AppContext = Depends(get_context)):
    """
    Add parts to the cart

    Request:
        {"items": {"small_motor": 2, "large_hub": 1}}
    """
    team = await _load_team(ctx, team_id)
    try:
        items = cart.build_cart_items(_parse_selection(payload))
    except cart.UnknownPart as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    team = await _save_team(ctx, team_id, cart.add_to_cart(team, items))
    return team.to_record()


@router.delete("/{team_id}/cart/{item_id}")
async def remove_from_cart(team_id: str, item_id: str, ctx: AppContext = Depends(get_context)):
    team = await _load_team(ctx, team_id)
    team = await _save_team(ctx, team_id, cart.remove_from_cart(team, item_id))
    return team.to_record()


@router.post("/{team_id}/checkout")
async def checkout(team_id: str, ctx: AppContext = Depends(get_context)):
    """Buy everything in the cart (refused while over budget)"""
    team = await _load_team(ctx, team_id)
    if not cart.can_checkout(team):
        raise _over_budget(team)

    team = await _save_team(ctx, team_id, cart.checkout(team))
    logger.info(f"🛒 Checkout {team_id} | Budget left: {team.budget} KB")
    return team.to_record()


@router.get("/{team_id}/items")
async def my_items(team_id: str, ctx: AppContext = Depends(get_context)):
    """Owned items with their sell-back price"""
    team = await _load_team(ctx, team_id)
    sell_rate = ctx.settings.sell_rate
    return {
        "budget": team.budget,
        "sellRate": sell_rate,
        "items": [
            {**item.to_record(), "sellPrice": cart.unit_sell_price(item.price, sell_rate)}
            for item in team.owned_items
        ],
    }


@router.post("/{team_id}/sell")
async def sell_item(team_id: str, payload: dict, ctx: AppContext = Depends(get_context)):
    """
    Sell owned parts back

    Request:
        {"itemId": "small_motor", "quantity": 1}
    """
    team = await _load_team(ctx, team_id)
    item_id = payload.get("itemId") or payload.get("item_id")
    quantity = payload.get("quantity", 1)
    if not item_id:
        raise HTTPException(status_code=400, detail="itemId required")

    try:
        updated = cart.sell_item(team, item_id, quantity, ctx.settings.sell_rate)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    team = await _save_team(ctx, team_id, updated)
    return team.to_record()


@router.post("/{team_id}/submit")
async def submit_build(team_id: str, request: Request, ctx: AppContext = Depends(get_context)):
    """Submit the build; the active team is retired"""
    try:
        team = await _load_team(ctx, team_id)
        if not cart.can_checkout(team):
            raise _over_budget(team)

        submission = await ctx.submissions.submit_team(team_id)
        if submission is None:
            raise HTTPException(status_code=404, detail=f"Team {team_id} not found")
    except HTTPException:
        raise
    except Exception as e:
        client_ip = request.client.host if request.client else "unknown"
        logger.error(
            f"❌ ERROR in /teams/{team_id}/submit from {client_ip}\n"
            f"Error: {str(e)}\n"
            f"Error Type: {type(e).__name__}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return {
        "success": True,
        "submissionId": submission.id,
        "message": "Your rover build has been sent to your teacher for review."
    }
