from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from quickbite.api.deps import (
    Identity,
    get_catalog_service,
    get_order_query_service,
    require_restaurant_owner,
    run_with_deadline,
)
from quickbite.schemas.catalog import (
    CategoryResponse,
    RestaurantRequest,
    RestaurantResponse,
    RestaurantUpdateRequest,
)
from quickbite.schemas.response import SuccessResponse
from quickbite.services.catalog_service import CatalogService
from quickbite.services.order_query import OrderQueryService

router = APIRouter()


def _dump(restaurant) -> dict:
    return RestaurantResponse.model_validate(restaurant).model_dump(mode="json")


# Public routes

@router.get("", response_model=SuccessResponse)
async def list_restaurants_endpoint(
    city: Optional[str] = Query(None, description="Only restaurants in this city."),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Active restaurants, best rated first."""
    restaurants = await run_with_deadline(catalog.list_restaurants(city))
    return SuccessResponse(data=[_dump(r) for r in restaurants])


@router.get("/my/list", response_model=SuccessResponse)
async def list_my_restaurants_endpoint(
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    restaurants = await run_with_deadline(catalog.list_owner_restaurants(identity.user_id))
    return SuccessResponse(data=[_dump(r) for r in restaurants])


@router.get("/{restaurant_id}", response_model=SuccessResponse)
async def get_restaurant_endpoint(restaurant_id: UUID, catalog: CatalogService = Depends(get_catalog_service)):
    restaurant = await run_with_deadline(catalog.get_restaurant(restaurant_id))
    return SuccessResponse(data=_dump(restaurant))


@router.get("/{restaurant_id}/categories", response_model=SuccessResponse)
async def list_categories_endpoint(restaurant_id: UUID, catalog: CatalogService = Depends(get_catalog_service)):
    """Menu categories in display order."""
    categories = await run_with_deadline(catalog.list_categories(restaurant_id))
    return SuccessResponse(data=[CategoryResponse.model_validate(c).model_dump(mode="json") for c in categories])


# Owner routes

@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_restaurant_endpoint(
    payload: RestaurantRequest,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    restaurant = await run_with_deadline(catalog.create_restaurant(payload, identity.user_id))
    return SuccessResponse(data=_dump(restaurant))


@router.put("/{restaurant_id}", response_model=SuccessResponse)
async def update_restaurant_endpoint(
    restaurant_id: UUID,
    payload: RestaurantUpdateRequest,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    restaurant = await run_with_deadline(catalog.update_restaurant(restaurant_id, payload, identity.user_id))
    return SuccessResponse(data=_dump(restaurant))


@router.delete("/{restaurant_id}", response_model=SuccessResponse)
async def delete_restaurant_endpoint(
    restaurant_id: UUID,
    identity: Identity = Depends(require_restaurant_owner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await run_with_deadline(catalog.delete_restaurant(restaurant_id, identity.user_id))
    return SuccessResponse(data={"message": "restaurant deleted successfully"})


@router.get("/{restaurant_id}/orders", response_model=SuccessResponse)
async def list_restaurant_orders_endpoint(
    restaurant_id: UUID,
    identity: Identity = Depends(require_restaurant_owner),
    queries: OrderQueryService = Depends(get_order_query_service),
):
    """Incoming orders for a restaurant the caller owns, newest first."""
    orders = await run_with_deadline(queries.list_restaurant_orders(restaurant_id, identity.user_id))
    return SuccessResponse(data=[o.model_dump(mode="json") for o in orders])
