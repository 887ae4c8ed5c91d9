from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # JWT Authentication
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Application
    APP_NAME: str = "CamWatch API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Navigation targets handed back by the route guard
    LOGIN_PATH: str = "/auth/login"
    UNAUTHORIZED_PATH: str = "/unauthorized"

    # Dashboards
    PARTNER_RECENT_ALERTS: int = 10
    CLIENT_RECENT_ALERTS: int = 5

    # Provisioning
    GENERATED_PASSWORD_LENGTH: int = 12

    # Default white-label theme
    DEFAULT_PRIMARY_COLOR: str = "#3b82f6"
    DEFAULT_SECONDARY_COLOR: str = "#1e40af"
    DEFAULT_ACCENT_COLOR: str = "#06b6d4"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
