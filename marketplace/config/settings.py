"""
Application configuration settings.
Handles environment variables and application-wide settings.
"""
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Tribal Marketplace API")
    app_version: str = Field(default="1.0.0")
    app_description: str = Field(
        default="REST backend for a marketplace of handcrafted tribal goods"
    )
    environment: Literal["development", "staging", "production"] = Field(default="development")
    debug: bool = Field(default=False)

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)
    reload: bool = Field(default=True)

    # Database settings
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    database_name: str = Field(default="tribal_marketplace")

    # MongoDB connection settings
    mongodb_server_selection_timeout_ms: int = Field(default=5000)
    mongodb_connect_timeout_ms: int = Field(default=5000)
    mongodb_socket_timeout_ms: int = Field(default=30000)
    mongodb_max_pool_size: int = Field(default=10)
    mongodb_min_pool_size: int = Field(default=1)
    mongodb_retry_writes: bool = Field(default=True)

    # Logging settings
    log_level: str = Field(default="INFO")

    # API settings
    api_prefix: str = Field(default="/api")
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:5173",
            "http://localhost:5174",
            "http://localhost:5175",
        ]
    )
    client_url: Optional[str] = Field(default=None)

    # Security settings
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60 * 24 * 7)
    reset_token_expire_minutes: int = Field(default=60)

    # Rate limiting (requests per window, per client IP)
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_requests: int = Field(default=100)
    rate_limit_window_seconds: int = Field(default=15 * 60)
    # Peers whose X-Forwarded-For header names the real client
    trusted_proxies: List[str] = Field(default_factory=list)

    # Pagination defaults
    default_page_size: int = Field(default=12)
    max_page_size: int = Field(default=100)

    # Business logic settings
    shipping_cost: float = Field(default=100)
    tax_rate: float = Field(default=0.18)
    low_stock_threshold: int = Field(default=10)
    max_cart_item_quantity: int = Field(default=100)

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v, info):
        """Refuse the placeholder secret outside development."""
        if info.data.get("environment") == "production" and v == "change-me-in-production":
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins including the configured client URL."""
        origins = list(self.cors_origins)
        if self.client_url and self.client_url not in origins:
            origins.append(self.client_url)
        return origins


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
