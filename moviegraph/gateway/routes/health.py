"""
Health routes — GET /api/health.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from moviegraph.gateway.dependencies import get_handler
from moviegraph.shared.database import Neo4jHandler
from moviegraph.shared.logging import setup_logging

logger = setup_logging("moviegraph.gateway.health", level="INFO")

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for GET /api/health."""

    status: str = Field(..., description="healthy or unhealthy")
    neo4j: bool = Field(..., description="Whether Neo4j answered a connectivity check")
    database: str | None = Field(None, description="Configured Neo4j database")


@router.get("/health", response_model=HealthResponse)
async def health(handler: Neo4jHandler | None = Depends(get_handler)) -> HealthResponse:
    """Report whether the gateway can reach Neo4j."""
    if handler is None:
        logger.warning("Health check requested before Neo4j handler was initialised")
        return HealthResponse(status="unhealthy", neo4j=False)

    reachable = await handler.verify()
    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        neo4j=reachable,
        database=handler.database,
    )
