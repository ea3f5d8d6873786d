"""
Database session management utilities for the petshop-core package.

This module provides async session factory, session management, and
transaction utilities for database operations.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..exceptions import DatabaseException, TransactionException

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages database sessions and provides transaction utilities."""

    def __init__(
        self, engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session manager with database engine.

        Args:
            engine: SQLAlchemy async engine
            session_config: Optional session configuration overrides
        """
        self.engine = engine

        default_config = {
            "expire_on_commit": False,
            "autoflush": True,
        }
        if session_config:
            default_config.update(session_config)

        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=default_config["autoflush"],
            expire_on_commit=default_config["expire_on_commit"],
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions with automatic cleanup.

        Yields:
            Database session
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolling back: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database transactions with automatic commit/rollback.

        Yields:
            Database session within a transaction

        Example:
            async with session_manager.get_transaction() as session:
                session.add(Customer(name="Maria Silva", phone="11999991234"))
                # Transaction is automatically committed on success
        """
        async with self.get_session() as session:
            async with session.begin():
                yield session

    async def execute_in_transaction(
        self, operation: Any, *args: Any, **kwargs: Any
    ) -> Any:
        """
        Execute an operation within a transaction.

        Args:
            operation: Async function taking the session as first argument
            *args: Arguments to pass to the operation
            **kwargs: Keyword arguments to pass to the operation

        Returns:
            Result of the operation

        Raises:
            TransactionException: If database transaction fails
        """
        operation_name = getattr(operation, "__name__", str(operation))
        try:
            async with self.get_transaction() as session:
                return await operation(session, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"Database operation {operation_name} failed: {e}")
            raise TransactionException(
                "Database transaction failed",
                operation=operation_name,
                original_error=e,
            ) from e

    async def create_schema(self, metadata: MetaData) -> None:
        """
        Create every table described by ``metadata`` that does not exist yet.

        Raises:
            DatabaseException: If the DDL fails
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseException(
                "Schema creation failed", error_code="SCHEMA_ERROR", original_error=e
            ) from e
        logger.info("Database tables created successfully")

    async def drop_schema(self, metadata: MetaData) -> None:
        """Drop every table described by ``metadata``."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
        logger.warning("All database tables dropped")

    async def close(self) -> None:
        """Dispose of the engine, closing every pooled connection."""
        await self.engine.dispose()
        logger.info("All database sessions and connections closed")


# Global session manager instance (will be initialized by application)
_session_manager: Optional[SessionManager] = None


def initialize_session_manager(engine: AsyncEngine) -> SessionManager:
    """
    Initialize the global session manager.

    Args:
        engine: SQLAlchemy async engine

    Returns:
        Initialized session manager
    """
    global _session_manager
    _session_manager = SessionManager(engine)
    logger.info("Session manager initialized")
    return _session_manager


def get_session_manager() -> SessionManager:
    """
    Get the global session manager instance.

    Raises:
        RuntimeError: If session manager is not initialized
    """
    if _session_manager is None:
        raise RuntimeError(
            "Session manager not initialized. Call initialize_session_manager() first."
        )
    return _session_manager
