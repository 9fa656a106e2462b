"""
Restaurants router - owner profile, menu photo, public menu and QR codes.
Endpoint: /api/restaurants/...
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database import get_db
from database.models import Restaurant
from core.dependencies import (
    get_current_restaurant,
    require_active_subscription,
    resolve_restaurant_by_slug,
)
from schemas.base import ErrorResponse
from schemas.restaurant import (
    RestaurantUpdate,
    RestaurantResponse,
    RestaurantProfileResponse,
    PublicMenuResponse,
    BillingPortalResponse,
)
from services.qr import generate_qr_png, generate_qr_svg
from services.restaurant import RestaurantService

router = APIRouter()


# ==================== OWNER (must be before /{slug}) ====================

@router.get("/me", response_model=RestaurantProfileResponse)
async def get_my_restaurant(
    restaurant: Restaurant = Depends(get_current_restaurant),
    db: Session = Depends(get_db),
):
    """Current restaurant with subscription state and payment history."""
    service = RestaurantService(db)
    profile = service.get_profile(restaurant.id)
    profile["restaurant"] = RestaurantResponse.model_validate(profile["restaurant"])
    return profile


@router.put(
    "/me",
    response_model=RestaurantResponse,
    responses={402: {"model": ErrorResponse, "description": "Subscription not active"}},
)
async def update_my_restaurant(
    data: RestaurantUpdate,
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    """Update name, phone, address or logo."""
    service = RestaurantService(db)
    return service.update_profile(restaurant, data.model_dump(exclude_unset=True))


@router.post(
    "/me/menu-photo",
    responses={402: {"model": ErrorResponse, "description": "Subscription not active"}},
)
async def upload_menu_photo(
    file: UploadFile = File(...),
    restaurant: Restaurant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    """Upload a photo of the printed menu card."""
    service = RestaurantService(db)
    contents = await file.read()
    photo_url = service.save_photo("menu-photos", file.content_type, contents)
    service.set_menu_photo(restaurant, photo_url)
    return {"success": True, "message": "Menu photo uploaded successfully", "photo_url": photo_url}


@router.post("/billing-portal", response_model=BillingPortalResponse)
async def open_billing_portal(
    restaurant: Restaurant = Depends(get_current_restaurant),
    db: Session = Depends(get_db),
):
    """
    Where to manage the subscription.
    Not gated: a lapsed restaurant needs this page to pay.
    """
    return RestaurantService(db).billing_portal(restaurant.id)


# ==================== PUBLIC ====================

@router.get("/{slug}/public", response_model=PublicMenuResponse)
async def get_public_menu(
    slug: str,
    db: Session = Depends(get_db),
):
    """Menu shown to diners after scanning the QR code. No auth."""
    return RestaurantService(db).get_public_menu(slug)


@router.get("/{slug}/qr.png")
async def get_qr_png(restaurant: Restaurant = Depends(resolve_restaurant_by_slug)):
    return Response(
        content=generate_qr_png(restaurant.slug),
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{restaurant.slug}-qr.png"'},
    )


@router.get("/{slug}/qr.svg")
async def get_qr_svg(restaurant: Restaurant = Depends(resolve_restaurant_by_slug)):
    return Response(
        content=generate_qr_svg(restaurant.slug),
        media_type="image/svg+xml",
        headers={"Content-Disposition": f'inline; filename="{restaurant.slug}-qr.svg"'},
    )
