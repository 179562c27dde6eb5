"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="HostelMeals", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, ge=1, le=65535, description="Server port")

    # MongoDB settings
    mongo_uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    mongo_db_name: str = Field(default="hostelDB", description="MongoDB database name")
    mongo_server_selection_timeout_ms: int = Field(
        default=5000, ge=100, description="Server selection timeout for MongoClient"
    )
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Payment processor (Stripe)
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")
    stripe_api_base: str = Field(
        default="https://api.stripe.com", description="Stripe API base URL"
    )
    payment_currency: str = Field(default="usd", description="Payment currency code")
    payment_timeout_sec: float = Field(
        default=10.0, gt=0, description="Payment processor request timeout"
    )

    # Authentication provider (Firebase ID tokens)
    firebase_project_id: Optional[str] = Field(
        default=None, description="Firebase project id (token audience)"
    )
    firebase_jwks_url: str = Field(
        default="https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com",
        description="JWKS endpoint publishing Firebase token signing keys",
    )
    auth_timeout_sec: float = Field(
        default=5.0, gt=0, description="JWKS fetch timeout"
    )
    auth_keys_refresh_sec: int = Field(
        default=3600, ge=0, description="JWKS cache lifetime"
    )
    strict_identity: bool = Field(
        default=False,
        description="Require a bearer token matching the acting email on mutating endpoints",
    )

    # Domain rules
    publish_min_likes: int = Field(
        default=10, ge=0, description="Likes an upcoming meal needs before publishing"
    )
    max_page_size: int = Field(default=50, ge=1, description="Largest allowed page size")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="Hostel Meals API", description="API documentation title"
    )
    api_description: str = Field(
        default="Hostel meal management: meals, requests, reviews, upcoming meals and memberships",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
