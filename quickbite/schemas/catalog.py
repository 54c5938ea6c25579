from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


class RestaurantRequest(BaseModel):
    name: str = Field("", description="Name of the restaurant.")
    description: str = ""
    address: str = Field("", description="Street address.")
    city: str = Field("", description="City used for public listing filters.")
    image_url: str = ""


class RestaurantUpdateRequest(RestaurantRequest):
    is_active: Optional[bool] = Field(None, description="Whether the restaurant accepts orders; omit to leave unchanged.")


class RestaurantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    description: str
    address: str
    city: str
    image_url: str
    is_active: bool
    rating: float
    created_at: datetime
    updated_at: datetime


class CategoryRequest(BaseModel):
    restaurant_id: uuid.UUID
    name: str = ""
    display_order: int = 0


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    restaurant_id: uuid.UUID
    name: str
    display_order: int
    created_at: datetime


class MenuItemRequest(BaseModel):
    category_id: uuid.UUID
    name: str = Field("", description="Name of the menu item (e.g., Paneer Wrap).")
    description: str = ""
    price: Decimal = Field(Decimal("0"), description="Selling price of the item.")
    image_url: str = ""
    is_veg: bool = False


class MenuItemUpdateRequest(BaseModel):
    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    image_url: str = ""
    is_available: bool = True
    is_veg: bool = False


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    description: str
    price: Decimal
    image_url: str
    is_available: bool
    is_veg: bool
    created_at: datetime
    updated_at: datetime
