"""Database initialization and dependency injection."""

import logging
from typing import AsyncGenerator

import fastapi
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.user.models
import components.plan.models
import components.invitation.models
import components.account.models
import components.category.models
import components.budget.models
import components.transaction.models
import components.goal.models
import components.note.models
import components.message.models

logger = logging.getLogger(__name__)
settings = get_settings()

# Create a single instance of DatabaseManager
db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with db_manager.get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI) -> None:
    """Initialize database connection."""

    @app.on_event("startup")
    async def create_tables() -> None:
        if settings.CREATE_TABLES:
            await db_manager.create_all()
            logger.info("Database schema ensured")

    @app.on_event("shutdown")
    async def dispose_engine() -> None:
        await db_manager.engine.dispose()
