"""Application configuration and router setup."""

import logging

import fastapi
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.core import init_db
from components.core.exceptions import BudgetError
from restapi.endpoints import (
    accounts,
    auth,
    budgets,
    categories,
    goals,
    groups,
    health_check,
    invitations,
    messages,
    notes,
    onboarding,
    reports,
    transactions,
    user,
)

logger = logging.getLogger(__name__)

TITLE = "Envelope Budget API"
DESCRIPTION = "Shared envelope budgeting: accounts, categories, monthly budgets and plan collaboration"
VERSION = "1.0.0"


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    """Render every failure as ``{"error": message, ...details}``."""

    @app.exception_handler(BudgetError)
    async def budget_error_handler(request: Request, exc: BudgetError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    app = fastapi.FastAPI(
        title=TITLE,
        description=DESCRIPTION,
        version=VERSION,
    )

    # Initialize database
    init_db.init_db(app)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(onboarding.router)
    app.include_router(accounts.router)
    app.include_router(budgets.router)
    app.include_router(categories.router)
    app.include_router(transactions.router)
    app.include_router(goals.router)
    app.include_router(notes.router)
    app.include_router(groups.router)
    app.include_router(invitations.router)
    app.include_router(messages.router)
    app.include_router(reports.router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title=TITLE,
            version=VERSION,
            description=DESCRIPTION,
            routes=app.routes,
        )
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
