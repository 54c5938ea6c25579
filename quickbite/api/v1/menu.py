import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from quickbite.api.deps import Identity, get_catalog_service, require_restaurant_owner, run_with_deadline
from quickbite.schemas.catalog import (
    CategoryRequest,
    CategoryResponse,
    MenuItemRequest,
    MenuItemResponse,
    MenuItemUpdateRequest,
)
from quickbite.schemas.response import SuccessResponse
from quickbite.services.catalog_service import CatalogService

router = APIRouter()
log = logging.getLogger(__name__)


# ====== MENU CATEGORIES ======

@router.post("/categories", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_category_endpoint(
    payload: CategoryRequest,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    category = await run_with_deadline(catalog.create_category(payload, identity.user_id))
    return SuccessResponse(data=CategoryResponse.model_validate(category).model_dump(mode="json"))


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
async def delete_category_endpoint(
    category_id: UUID,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await run_with_deadline(catalog.delete_category(category_id, identity.user_id))
    return SuccessResponse(data={"message": "category deleted successfully"})


@router.get("/categories/{category_id}/items", response_model=SuccessResponse)
async def list_menu_items_endpoint(category_id: UUID, catalog: CatalogService = Depends(get_catalog_service)):
    items = await run_with_deadline(catalog.list_menu_items(category_id))
    return SuccessResponse(data=[MenuItemResponse.model_validate(i).model_dump(mode="json") for i in items])


# ====== MENU ITEMS ======

@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_menu_item_endpoint(
    payload: MenuItemRequest,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    item = await run_with_deadline(catalog.create_menu_item(payload, identity.user_id))
    return SuccessResponse(data=MenuItemResponse.model_validate(item).model_dump(mode="json"))


@router.put("/items/{menu_item_id}", response_model=SuccessResponse)
async def update_menu_item_endpoint(
    menu_item_id: UUID,
    payload: MenuItemUpdateRequest,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Edits a menu item. New prices apply to future orders only."""
    item = await run_with_deadline(catalog.update_menu_item(menu_item_id, payload, identity.user_id))
    log.info("Menu item %s updated (price %s, available=%s)", item.id, item.price, item.is_available)
    return SuccessResponse(data=MenuItemResponse.model_validate(item).model_dump(mode="json"))


@router.delete("/items/{menu_item_id}", response_model=SuccessResponse)
async def delete_menu_item_endpoint(
    menu_item_id: UUID,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await run_with_deadline(catalog.delete_menu_item(menu_item_id, identity.user_id))
    return SuccessResponse(data={"message": "menu item deleted successfully"})
