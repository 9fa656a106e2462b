"""
Menu router - categories and items of the logged-in owner's restaurant.
Endpoint: /api/menu/...

Reads need a login; every write also needs an active subscription (402).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Restaurant
from core.dependencies import get_current_restaurant, require_active_subscription
from schemas.base import SuccessResponse
from schemas.menu import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    OwnerMenuResponse,
)
from services.menu import MenuService
from services.restaurant import RestaurantService

router = APIRouter()


# ==================== OVERVIEW ====================

@router.get("", response_model=OwnerMenuResponse)
async def get_menu(
    restaurant: Restaurant = Depends(get_current_restaurant),
    db: Session = Depends(get_db),
):
    """Menu card photo and all items of the owner's restaurant."""
    return MenuService(db, restaurant.id).overview(restaurant)


# ==================== CATEGORIES ====================

@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(
    restaurant: Restaurant = Depends(get_current_restaurant),
    db: Session = Depends(get_db),
):
    return MenuService(db, restaurant.id).list_categories()


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    return MenuService(db, restaurant.id).create_category(data.model_dump())


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    return MenuService(db, restaurant.id).update_category(
        category_id, data.model_dump(exclude_unset=True)
    )


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: int,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    MenuService(db, restaurant.id).delete_category(category_id)
    return {"success": True, "message": "Category deleted successfully"}


# ==================== ITEMS ====================

@router.get("/items", response_model=List[MenuItemResponse])
async def list_items(
    category_id: Optional[int] = Query(None),
    restaurant: Restaurant = Depends(get_current_restaurant),
    db: Session = Depends(get_db),
):
    return MenuService(db, restaurant.id).list_items(category_id)


@router.post("/items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    data: MenuItemCreate,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    return MenuService(db, restaurant.id).create_item(data.model_dump())


@router.put("/items/{item_id}", response_model=MenuItemResponse)
async def update_item(
    item_id: int,
    data: MenuItemUpdate,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    return MenuService(db, restaurant.id).update_item(
        item_id, data.model_dump(exclude_unset=True)
    )


@router.delete("/items/{item_id}", response_model=SuccessResponse)
async def delete_item(
    item_id: int,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    MenuService(db, restaurant.id).delete_item(item_id)
    return {"success": True, "message": "Menu item deleted successfully"}


@router.post("/items/{item_id}/photo", response_model=MenuItemResponse)
async def upload_item_photo(
    item_id: int,
    file: UploadFile = File(...),
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    menu = MenuService(db, restaurant.id)
    menu.get_item(item_id)
    contents = await file.read()
    photo_url = RestaurantService(db).save_photo("menu-items", file.content_type, contents)
    return menu.set_item_photo(item_id, photo_url)
