"""
Application settings.
Values come from environment variables or a local .env file.
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    
    # App
    app_name: str = "QR Menu API"
    debug: bool = False
    
    # Database
    database_url: str = "sqlite:///./qrmenu.db"
    
    # Security
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    
    # CORS (comma separated)
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    
    # Public menu links (QR codes point here)
    frontend_url: str = "http://localhost:3000"
    
    # Uploaded photos
    upload_dir: str = "./uploads"
    max_upload_size: int = 5 * 1024 * 1024  # 5MB
    
    # Payment gateway
    stripe_api_key: str = ""
    stripe_webhook_secret: str = ""
    
    # Subscription
    subscription_period_days: int = 30
    subscription_price_cents: int = 50000  # ₹500
    currency: str = "INR"
    payment_history_limit: int = 10
    
    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
