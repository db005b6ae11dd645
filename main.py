"""Main entry point for the FastAPI application."""

import logging

import uvicorn

from components.core.config import get_settings
# Import all models to ensure they're loaded before app creation
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

from restapi.router import create_app

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", reload=True)
