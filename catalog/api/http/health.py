"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from catalog.logging import logger

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    database: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Check health status of the service and its store.

    Returns:
        HealthResponse: Health status of the service and the database.
        The status code is 503 Service Unavailable when the database
        cannot be reached.
    """
    db_status = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OperationalError, SQLAlchemyError, TimeoutError) as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    except Exception as e:
        # Catch-all for health checks to prevent endpoint failure
        logger.error(f"Unexpected database health check error: {e}")
        db_status = "unhealthy"

    if db_status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(status=db_status, database=db_status)
