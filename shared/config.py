"""
Centralized configuration for the Ticket AI client.

All settings are loaded from environment variables with sensible defaults.
Supabase settings are namespaced with SUPABASE_*.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Ticket AI"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Supabase (client side, anon key only)
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Tables holding the application profile and the assigned role
    profiles_table: str = "profiles"
    roles_table: str = "user_roles"

    # Frontend URLs (email confirmation redirects back here)
    frontend_url: str = "http://localhost:5173"

    # Navigation
    auth_route: str = "/auth"
    landing_route: str = "/dashboard"

    @property
    def email_redirect_url(self) -> str:
        """URL the confirmation email links back to."""
        return f"{self.frontend_url.rstrip('/')}{self.auth_route}"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
