"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from banking_api.models.base import StoreClient, get_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(store: StoreClient = Depends(get_store)):
    """Return application health status including store connectivity."""
    try:
        store.ping()
        db_status = "healthy"
    except SQLAlchemyError:
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "banking-api",
        "database": db_status,
    }
