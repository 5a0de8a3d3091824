"""Health check endpoint for load balancers and monitoring."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitledger.db.session import get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    """Simple liveness check."""
    return {"status": "ok"}


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness: app + DB connectivity."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.exception("Readiness check failed")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "database": str(e)},
        )
    return {"status": "ok", "database": "connected"}
