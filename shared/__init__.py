"""
Shared infrastructure for the Ticket AI client.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- logging: Rich logging setup for the terminal front end

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    TicketAIError,
    ValidationError,
    ExternalServiceError,
)
from .logging import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "TicketAIError",
    "ValidationError",
    "ExternalServiceError",
    "configure_logging",
]
