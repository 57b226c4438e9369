import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.models.user import User
from app.schemas.timezone import WorldClockCityCreate, WorldClockCityReorder, WorldClockCityUpdate
from app.services.world_clock_service import WorldClockService, city_to_dict
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/world-clock-cities", tags=["world-clock"])


@router.get("")
async def list_cities(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        cities = WorldClockService.list_cities(db, current_user.id)
        return {"success": True, "data": [city_to_dict(c) for c in cities]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching world clock cities: {e}")
        raise UpstreamError("Failed to fetch cities")


@router.post("")
async def add_city(
    payload: WorldClockCityCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        city = WorldClockService.add_city(db, current_user.id, payload)
        return {"success": True, "data": city_to_dict(city)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error adding world clock city: {e}")
        raise UpstreamError("Failed to add city to World Clock")


@router.delete("")
async def clear_cities(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        removed = WorldClockService.clear_cities(db, current_user.id)
        return {"success": True, "data": {"removed": removed}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error clearing world clock cities: {e}")
        raise UpstreamError("Failed to clear cities")


@router.post("/reorder")
async def reorder_cities(
    payload: WorldClockCityReorder,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        cities = WorldClockService.reorder(db, current_user.id, payload.cities)
        return {"success": True, "data": [city_to_dict(c) for c in cities]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reordering world clock cities: {e}")
        raise UpstreamError("Failed to reorder cities")


@router.post("/initialize")
async def initialize_cities(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        cities = WorldClockService.initialize_defaults(db, current_user.id)
        return {"success": True, "data": [city_to_dict(c) for c in cities]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error initializing default world clock cities: {e}")
        raise UpstreamError("Failed to initialize cities")


@router.get("/stats")
async def city_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"success": True, "data": WorldClockService.stats(db, current_user.id)}


@router.patch("/{city_id}")
async def update_city(
    city_id: str,
    payload: WorldClockCityUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        city = WorldClockService.update_city(db, current_user.id, city_id, payload)
        return {"success": True, "data": city_to_dict(city)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating world clock city {city_id}: {e}")
        raise UpstreamError("Failed to update city")


@router.delete("/{city_id}")
async def remove_city(
    city_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        WorldClockService.remove_city(db, current_user.id, city_id)
        return {"success": True, "data": {"message": "City removed from World Clock"}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error removing world clock city {city_id}: {e}")
        raise UpstreamError("Failed to remove city")
