"""Health checks and monitoring endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from marketplace_booking.config.database import get_db

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "marketplace-booking-api"}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check with dependencies"""
    checks = {
        "api": "healthy",
        "database": "unknown",
        "overall": "unknown"
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {str(e)}"

    # Overall status
    if all(status == "healthy" for name, status in checks.items() if name != "overall"):
        checks["overall"] = "healthy"
    else:
        checks["overall"] = "degraded"

    return checks
