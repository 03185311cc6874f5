"""
API v1 router setup
Public slot lookups plus JWT-authenticated booking and availability management
"""
from fastapi import APIRouter

from marketplace_booking.api.v1 import availability, appointments

api_v1_router = APIRouter()

api_v1_router.include_router(availability.router)
api_v1_router.include_router(appointments.router)


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and authentication overview."""
    return {
        "version": "1.0",
        "authentication": {
            "public": "Slot lookups and schedule listings",
            "bearer": "JWT Bearer token required for bookings and availability changes",
        }
    }
