import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.models.user import User
from app.schemas.timezone import TimezoneCreate, TimezoneRead, TimezoneReorder, TimezoneUpdate
from app.services.timezone_service import TimezoneService
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user-timezones", tags=["timezones"])


def _dump(rows):
    return [TimezoneRead.model_validate(r).model_dump() for r in rows]


@router.get("")
async def list_timezones(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return {"success": True, "data": _dump(TimezoneService.list_timezones(db, current_user.id))}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching user timezones: {e}")
        raise UpstreamError("Failed to fetch timezones")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_timezone(
    payload: TimezoneCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        row = TimezoneService.create_timezone(db, current_user.id, payload)
        return {"success": True, "data": TimezoneRead.model_validate(row).model_dump()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating user timezone: {e}")
        raise UpstreamError("Failed to add timezone")


@router.post("/reorder")
async def reorder_timezones(
    payload: TimezoneReorder,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return {"success": True, "data": _dump(TimezoneService.reorder(db, current_user.id, payload.timezones))}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reordering user timezones: {e}")
        raise UpstreamError("Failed to reorder timezones")


@router.post("/initialize")
async def initialize_timezones(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Seed UTC (default), New York, London and Tokyo."""
    try:
        return {"success": True, "data": _dump(TimezoneService.initialize_defaults(db, current_user.id))}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error initializing default timezones: {e}")
        raise UpstreamError("Failed to initialize timezones")


@router.get("/stats")
async def timezone_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"success": True, "data": TimezoneService.stats(db, current_user.id)}


@router.put("/{timezone_id}")
async def update_timezone(
    timezone_id: str,
    payload: TimezoneUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        row = TimezoneService.update_timezone(db, current_user.id, timezone_id, payload)
        return {"success": True, "data": TimezoneRead.model_validate(row).model_dump()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating user timezone {timezone_id}: {e}")
        raise UpstreamError("Failed to update timezone")


@router.delete("/{timezone_id}")
async def delete_timezone(
    timezone_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        TimezoneService.delete_timezone(db, current_user.id, timezone_id)
        return {"success": True, "data": {"message": "Timezone removed"}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting user timezone {timezone_id}: {e}")
        raise UpstreamError("Failed to delete timezone")
