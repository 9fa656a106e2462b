"""
Authentication router.
Handles restaurant registration and owner login.
Endpoint: /api/auth/...
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    UserInfo,
    RestaurantBrief,
)
from schemas.base import ErrorResponse
from services.auth import AuthService


router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Email already registered"}},
)
async def register(
    data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new restaurant and its owner.
    The subscription starts active with no expiry until the first payment.
    """
    auth_service = AuthService(db)
    
    if auth_service.email_exists(data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    
    user, restaurant, token = auth_service.register(
        restaurant_name=data.restaurant_name,
        email=data.email,
        password=data.password,
        phone=data.phone,
        address=data.address,
    )
    
    return AuthResponse(
        message="Registration successful",
        token=token,
        user=UserInfo.model_validate(user),
        restaurant=RestaurantBrief.model_validate(restaurant),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Login with email and password."""
    auth_service = AuthService(db)
    
    user = auth_service.authenticate(data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )
    
    return AuthResponse(
        message="Login successful",
        token=auth_service.create_token(user),
        user=UserInfo.model_validate(user),
        restaurant=RestaurantBrief.model_validate(user.restaurant),
    )
