"""
Budget/Cart Engine

Pure state transitions over a TeamProfile. Every function returns a new
profile and leaves its input untouched.

Invariants:
  - spent == sum(price * quantity) over cart, after every transition
  - no line in cart or owned_items has quantity 0
  - checkout folds cart into owned_items, charges the budget, empties the
    cart and zeroes spent in one step

Budget checks are advisory: add_to_cart accepts an overspent cart, and
checkout does not check the budget. Callers gate checkout/submit on
can_checkout().
"""
from decimal import ROUND_FLOOR, Decimal
from typing import Dict, Iterable, List

from rover_shop.catalog import get_part
from rover_shop.models import CartItem, TeamProfile


class UnknownPart(ValueError):
    """Part id is not in the catalog"""


class ItemNotOwned(ValueError):
    """Team does not own the item it tries to sell"""


class InvalidSellQuantity(ValueError):
    """Sell quantity outside 1..owned quantity"""


def cart_total(items: Iterable[CartItem]) -> int:
    return sum(item.price * item.quantity for item in items)


def remaining_budget(profile: TeamProfile) -> int:
    return profile.budget - profile.spent


def can_checkout(profile: TeamProfile) -> bool:
    return remaining_budget(profile) >= 0


def _merge_lines(lines: List[CartItem], incoming: Iterable[CartItem]) -> List[CartItem]:
    """Merge incoming lines into a copy of lines by id, summing quantities"""
    merged = [line.model_copy() for line in lines]
    index = {line.id: pos for pos, line in enumerate(merged)}

    for item in incoming:
        pos = index.get(item.id)
        if pos is None:
            index[item.id] = len(merged)
            merged.append(item.model_copy())
        else:
            existing = merged[pos]
            merged[pos] = existing.model_copy(update={"quantity": existing.quantity + item.quantity})

    return merged


def build_cart_items(selection: Dict[str, int]) -> List[CartItem]:
    """
    Turn a {part_id: quantity} selection into cart lines

    Prices are copied from the catalog at this moment. Zero and negative
    quantities are skipped.

    Raises:
        UnknownPart: If a part id is not in the catalog
    """
    items = []
    for part_id, quantity in selection.items():
        part = get_part(part_id)
        if part is None:
            raise UnknownPart(f"Unknown part: {part_id}")
        if quantity <= 0:
            continue
        items.append(CartItem(
            id=part.id,
            name=part.name,
            price=part.price,
            quantity=quantity,
            category=part.category,
        ))
    return items


def preview_selection(profile: TeamProfile, items: Iterable[CartItem]) -> Dict:
    """Cost of a pending selection and what would be left after adding it"""
    selection_cost = cart_total(items)
    remaining = remaining_budget(profile) - selection_cost
    return {
        "selection_cost": selection_cost,
        "remaining": remaining,
        "can_afford": remaining >= 0,
    }


def add_to_cart(profile: TeamProfile, items: Iterable[CartItem]) -> TeamProfile:
    cart = _merge_lines(profile.cart, items)
    return profile.model_copy(update={"cart": cart, "spent": cart_total(cart)})


def remove_from_cart(profile: TeamProfile, item_id: str) -> TeamProfile:
    cart = [line.model_copy() for line in profile.cart if line.id != item_id]
    return profile.model_copy(update={"cart": cart, "spent": cart_total(cart)})


def checkout(profile: TeamProfile) -> TeamProfile:
    """
    Buy everything in the cart

    The caller must check can_checkout() first; an overspent cart is
    charged as-is and leaves a negative budget.

    Returns:
        Profile with cart merged into owned_items, budget charged,
        empty cart and spent == 0. An empty cart returns the profile
        unchanged.
    """
    cart = list(profile.cart)
    if not cart:
        return profile

    return profile.model_copy(update={
        "owned_items": _merge_lines(profile.owned_items, cart),
        "budget": profile.budget - cart_total(cart),
        "cart": [],
        "spent": 0,
    })


def sell_price(price: int, quantity: int, sell_rate: float) -> int:
    """floor(price * sell_rate * quantity), without float rounding drift"""
    value = Decimal(str(sell_rate)) * price * quantity
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def unit_sell_price(price: int, sell_rate: float) -> int:
    return sell_price(price, 1, sell_rate)


def sell_item(profile: TeamProfile, item_id: str, quantity: int, sell_rate: float) -> TeamProfile:
    """
    Sell owned parts back for a share of their price

    Args:
        profile: Current profile
        item_id: Owned item id
        quantity: How many to sell, 1..owned quantity
        sell_rate: Share of the price refunded

    Returns:
        Profile with the owned line reduced (dropped at 0) and the refund
        added to the budget

    Raises:
        ItemNotOwned: If the team owns no such item
        InvalidSellQuantity: If quantity is outside 1..owned quantity
    """
    owned = next((line for line in profile.owned_items if line.id == item_id), None)
    if owned is None:
        raise ItemNotOwned(f"Item not owned: {item_id}")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 < quantity <= owned.quantity:
        raise InvalidSellQuantity(
            f"Cannot sell {quantity} of {item_id}: owned {owned.quantity}"
        )

    owned_items = []
    for line in profile.owned_items:
        if line.id != item_id:
            owned_items.append(line.model_copy())
        elif line.quantity > quantity:
            owned_items.append(line.model_copy(update={"quantity": line.quantity - quantity}))

    return profile.model_copy(update={
        "owned_items": owned_items,
        "budget": profile.budget + sell_price(owned.price, quantity, sell_rate),
    })
