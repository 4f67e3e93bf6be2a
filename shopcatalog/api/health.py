"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.catalog.repository import ProductRepository
from shopcatalog.domain.exceptions import StoreError
from shopcatalog.infrastructure.database import get_session

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    from shopcatalog.infrastructure.config import settings

    return HealthResponse(
        status="healthy",
        service="shop-catalog",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status; 503 when the database does not answer.
    """
    try:
        await ProductRepository(session).ping()
    except StoreError as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "error": exc.message},
        )
    return JSONResponse(content={"status": "ready"})
