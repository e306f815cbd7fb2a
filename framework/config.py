from typing import Optional
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "ERP Backend"
    APP_DESCRIPTION: str = "Modular ERP backend with JWT auth and a generic dynamic-query repository"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True
    SECRET_KEY: str = "your-super-secret-key-change-it-in-production"
    JWT_ALGORITHM: str = "HS256"

    # --- Database (MySQL/SQLModel) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "erp_db"
    DB_ECHO: bool = False

    @property
    def DATABASE_URL(self) -> str:
        # Build async MySQL connection URL
        safe_password = quote_plus(self.DB_PASSWORD)
        return f"mysql+aiomysql://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Dynamic query paging ---
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500  # Enforced at the API layer only
    MAX_PAGE: int = 1_000_000  # Keeps the OFFSET inside a signed 64-bit range

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Cookie ---
    ACCESS_TOKEN_COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False  # Set True in production (HTTPS only)
    COOKIE_SAMESITE: str = "lax"  # lax, strict, none

    # --- Logging ---
    LOG_DIR: str = "logs"

    # --- API route prefixes ---
    API_V1_SECURITY_PREFIX: str = "/api/v1/security"

    # --- Gunicorn process name (optional) ---
    GUNICORN_PROC_NAME: Optional[str] = None  # Fallback to APP_NAME when empty

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
