"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Precta API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")

    # Public API base URL the web client is built against
    public_api_url: str = Field(default="http://localhost:3001", alias="VITE_API_URL")

    # Auth (tokens are issued by the external auth provider)
    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_cookie_name: str = Field(default="session", alias="SESSION_COOKIE_NAME")
    auth_service_url: str = Field(default="http://localhost:3002", alias="AUTH_SERVICE_URL")
    auth_proxy_timeout_seconds: float = Field(default=10.0, alias="AUTH_PROXY_TIMEOUT_SECONDS")

    # Payments (Paystack handles M-Pesa and card)
    paystack_secret_key: str = Field(default="", alias="PAYSTACK_SECRET_KEY")
    paystack_base_url: str = Field(default="https://api.paystack.co", alias="PAYSTACK_BASE_URL")
    paystack_timeout_seconds: float = Field(default=30.0, alias="PAYSTACK_TIMEOUT_SECONDS")
    payment_currency: str = Field(default="KES", alias="PAYMENT_CURRENCY")
    payment_reference_prefix: str = Field(default="PRECTA", alias="PAYMENT_REFERENCE_PREFIX")

    # Video consultations
    video_room_prefix: str = Field(default="room", alias="VIDEO_ROOM_PREFIX")

    # Scheduling
    default_timezone: str = Field(default="Africa/Nairobi", alias="DEFAULT_TIMEZONE")
    cancellation_cutoff_hours: int = Field(default=2, alias="CANCELLATION_CUTOFF_HOURS")
    default_appointment_buffer_minutes: int = Field(
        default=0, alias="DEFAULT_APPOINTMENT_BUFFER_MINUTES"
    )
    default_max_advance_booking_days: int = Field(
        default=30, alias="DEFAULT_MAX_ADVANCE_BOOKING_DAYS"
    )

    # Orders
    order_delivery_fee: float = Field(default=200.0, alias="ORDER_DELIVERY_FEE")

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        if isinstance(self.cors_origins_str, str):
            return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]
        return [self.cors_origins_str]

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance
settings = get_settings()
