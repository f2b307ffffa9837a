"""Health check routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from app.database.connection import get_db

logger = structlog.get_logger()

router = APIRouter(tags=["Health"])


@router.get("/health", summary="Health check")
def health(db: Session = Depends(get_db)):
    """Report service health, including database reachability."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable"}
        )
    return {"status": "healthy", "database": "reachable"}
