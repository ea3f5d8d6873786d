"""
Database connection, session management, and persistence utilities.

This module provides async SQLAlchemy engine configuration, session management
and the gateway the onboarding wizard uses to create customers and pets.
"""

from .connection import (
    DatabaseConfig,
    create_engine,
)
from .gateway import SQLAlchemyEntityGateway
from .session import (
    SessionManager,
    get_session_manager,
    initialize_session_manager,
)

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    # Session management
    "SessionManager",
    "initialize_session_manager",
    "get_session_manager",
    # Persistence
    "SQLAlchemyEntityGateway",
]
