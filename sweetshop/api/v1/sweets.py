"""Inventory endpoints: list, search, create, update, delete, purchase, restock."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from sweetshop.api.deps import get_inventory_store
from sweetshop.api.v1.auth import get_current_user, require_admin
from sweetshop.core.errors import BusinessRuleViolation, NotFound
from sweetshop.schemas.auth import CurrentUser
from sweetshop.schemas.sweets import (
    MessageResponse,
    RestockRequest,
    SweetCategory,
    SweetInput,
    SweetOut,
    SweetSearch,
)
from sweetshop.services.inventory import InventoryStore
from sweetshop.services.validation import check_search

router = APIRouter()

Inventory = Annotated[InventoryStore, Depends(get_inventory_store)]


@router.get("", response_model=list[SweetOut])
def list_sweets(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    inventory: Inventory,
) -> list[SweetOut]:
    """Return every sweet in storage order."""
    return [SweetOut.model_validate(s) for s in inventory.get_all()]


@router.get("/search", response_model=list[SweetOut])
def search_sweets(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    inventory: Inventory,
    name: Annotated[str | None, Query(description="Case-insensitive substring of the name")] = None,
    category: Annotated[SweetCategory | None, Query(description="Exact category")] = None,
    min_price: Annotated[float | None, Query(alias="minPrice", allow_inf_nan=False, description="Inclusive lower price bound")] = None,
    max_price: Annotated[float | None, Query(alias="maxPrice", allow_inf_nan=False, description="Inclusive upper price bound")] = None,
) -> list[SweetOut]:
    """
    Filter sweets. Every supplied filter must match (logical AND); omitted
    filters impose no constraint.
    """
    search = check_search(
        SweetSearch(name=name, category=category, min_price=min_price, max_price=max_price)
    )
    return [SweetOut.model_validate(s) for s in inventory.search(search)]


@router.post("", response_model=SweetOut, status_code=status.HTTP_201_CREATED)
def create_sweet(
    body: SweetInput,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    inventory: Inventory,
) -> SweetOut:
    """Add a sweet to the inventory. Open to any authenticated user."""
    return SweetOut.model_validate(inventory.create(body))


@router.put("/{sweet_id}", response_model=SweetOut)
def update_sweet(
    sweet_id: int,
    body: SweetInput,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    inventory: Inventory,
) -> SweetOut:
    """Replace name, category, price and quantity of a sweet. Open to any authenticated user."""
    return SweetOut.model_validate(inventory.update(sweet_id, body))


@router.delete("/{sweet_id}", response_model=MessageResponse)
def delete_sweet(
    sweet_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    inventory: Inventory,
) -> MessageResponse:
    """Delete a sweet permanently (admin only)."""
    if inventory.get_by_id(sweet_id) is None:
        raise NotFound("Sweet not found")
    if not inventory.delete(sweet_id):
        raise NotFound("Sweet not found")
    return MessageResponse(message="Sweet deleted successfully")


@router.post("/{sweet_id}/purchase", response_model=SweetOut)
def purchase_sweet(
    sweet_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    inventory: Inventory,
) -> SweetOut:
    """
    Buy one unit. The decrement happens in a single conditional UPDATE;
    the follow-up lookup only decides between 404 and out-of-stock.
    """
    sweet = inventory.purchase(sweet_id)
    if sweet is None:
        if inventory.get_by_id(sweet_id) is None:
            raise NotFound("Sweet not found")
        raise BusinessRuleViolation("Item is out of stock")
    return SweetOut.model_validate(sweet)


@router.post("/{sweet_id}/restock", response_model=SweetOut)
def restock_sweet(
    sweet_id: int,
    body: RestockRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    inventory: Inventory,
) -> SweetOut:
    """Add units to stock (admin only). Refused if the total would overflow the quantity column."""
    sweet = inventory.restock(sweet_id, body.amount)
    if sweet is None:
        if inventory.get_by_id(sweet_id) is None:
            raise NotFound("Sweet not found")
        raise BusinessRuleViolation("Restock would exceed the maximum stock level")
    return SweetOut.model_validate(sweet)
