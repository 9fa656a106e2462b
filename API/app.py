"""
QR Menu SaaS - Main Application

Multi-tenant restaurant menu service:
- /api/auth/...         → Registration, login
- /api/restaurants/...  → Owner profile, public menu, QR codes
- /api/menu/...         → Categories and items (writes need an active subscription)
- /api/payments/...     → Manual subscription payments
- /api/webhooks/...     → Payment gateway webhooks
"""

import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from database import init_db, db
from core.config import settings
from core.exceptions import AppError
from routers import (
    auth_router, restaurants_router, menu_router,
    payments_router, webhooks_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("🚀 Starting QR Menu API...")

    try:
        init_db()
        logger.info("✅ Database initialized")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise

    if not settings.stripe_webhook_secret:
        logger.warning("⚠️  STRIPE_WEBHOOK_SECRET is not set, gateway webhooks will be rejected")

    logger.info("✅ QR Menu API started successfully!")
    
    yield
    
    logger.info("👋 Shutting down QR Menu API...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Restaurant menu SaaS: owners manage a menu, get a QR code for the
    public menu page and keep a subscription that unlocks editing.
    
    * **Auth** - Register restaurant, login
    * **Restaurants** - Profile, menu photo, public menu, QR code
    * **Menu** - Categories and items
    * **Payments** - UPI / net banking subscription payments
    * **Webhooks** - Payment gateway events
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve uploaded photos
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


# Domain errors: 400 / 402 / 404 / 409 with the failing stage
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} [{exc.stage}] {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Malformed input is a 400, like every other invalid-input error
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Validation failed",
            "stage": "validation",
            "errors": jsonable_encoder(exc.errors()),
        }
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "stage": "server",
            "detail": str(exc) if settings.debug else None
        }
    )


# ==================== HEALTH ====================

@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "QR Menu API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    from sqlalchemy import text
    try:
        with db.get_session() as session:
            session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected", "error": str(e)}
        )


# ==================== ROUTES ====================

API_PREFIX = "/api"

# Webhooks read the raw body; keep them independent of JSON body models
app.include_router(webhooks_router, prefix=f"{API_PREFIX}/webhooks", tags=["Webhooks"])
app.include_router(auth_router, prefix=f"{API_PREFIX}/auth", tags=["Authentication"])
app.include_router(restaurants_router, prefix=f"{API_PREFIX}/restaurants", tags=["Restaurants"])
app.include_router(menu_router, prefix=f"{API_PREFIX}/menu", tags=["Menu"])
app.include_router(payments_router, prefix=f"{API_PREFIX}/payments", tags=["Payments"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
