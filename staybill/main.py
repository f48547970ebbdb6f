"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from staybill.api.routes import api_router
from staybill.core.config import settings
from staybill.core.database import Base, engine

# Import models for Base.metadata.create_all - order matters for foreign keys
from staybill.models import (
    associations,  # noqa: F401
    property,  # noqa: F401
    stay,  # noqa: F401
    user,  # noqa: F401
)
from staybill.services.settlement import SettlementError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    # Shutdown: cleanup if needed


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Energy settlement for short-term rental stays",
    lifespan=lifespan,
)


@app.exception_handler(SettlementError)
async def settlement_error_handler(request: Request, exc: SettlementError) -> JSONResponse:
    """Report invalid settlement input as a 422 with the error kind."""
    logger.info("Rejected settlement input on %s: %s", request.url.path, exc.kind)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message, "kind": exc.kind},
    )


# Include API routers
app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "staybill.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
