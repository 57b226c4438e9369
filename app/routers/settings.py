"""Account settings: notifications, profile, avatar, data export and account deletion."""
import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.dependencies.rate_limit import rate_limit
from app.models.user import User
from app.schemas.session import NotificationPreferencesUpdate
from app.schemas.settings import AccountDeletionAction, AccountDeletionRead, SettingsUpdate
from app.services.account_service import AccountService
from app.services.profile_service import ProfileService
from app.services.session_service import SessionService
from app.utils.errors import UpstreamError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/notifications")
async def get_notification_preferences(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return {"success": True, "data": SessionService.get_notification_preferences(db, current_user.id)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch notification preferences for user {current_user.id}: {e}")
        raise UpstreamError("Failed to fetch notification preferences")


@router.post("/notifications")
async def update_notification_preferences(
    payload: NotificationPreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        prefs = SessionService.save_notification_preferences(
            db, current_user.id, payload.login_alerts, payload.new_device_logins
        )
        return {"success": True, "data": prefs}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update notification preferences for user {current_user.id}: {e}")
        raise UpstreamError("Failed to update notification preferences")


@router.get("/profile")
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return {"success": True, "data": ProfileService.get_settings(db, current_user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch settings for user {current_user.id}: {e}")
        raise UpstreamError("Failed to fetch settings")


@router.put("/profile")
async def update_settings(
    payload: SettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    try:
        if payload.profile is not None:
            ProfileService.update_profile(db, current_user, payload.profile)
        if payload.preferences is not None:
            ProfileService.update_preferences(db, current_user.id, payload.preferences)
        return {"success": True, "data": ProfileService.get_settings(db, current_user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update settings for user {current_user.id}: {e}")
        raise UpstreamError("Failed to update settings")


@router.post("/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    _: bool = Depends(rate_limit),
):
    """Image files up to 5MB."""
    try:
        url = await ProfileService.upload_avatar(db, current_user, file)
        return {"success": True, "data": {"avatar_url": url}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Avatar upload failed for user {current_user.id}: {e}")
        raise UpstreamError("Failed to upload avatar")


@router.get("/export-data")
async def export_data(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        data = ProfileService.export_data(db, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Data export failed for user {current_user.id}: {e}")
        raise UpstreamError("Failed to export data")

    filename = f"devtoolshub-data-export-{utcnow().date().isoformat()}.json"
    return JSONResponse(
        content=jsonable_encoder(data),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/account-deletion")
async def get_account_deletion(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Pending deletion request, or null."""
    try:
        deletion = AccountService.get_pending_deletion(db, current_user.id)
        data = AccountDeletionRead.model_validate(deletion).model_dump() if deletion else None
        return {"success": True, "data": data}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch deletion status for user {current_user.id}: {e}")
        raise UpstreamError("Internal server error")


@router.post("/account-deletion")
async def account_deletion_action(
    payload: AccountDeletionAction,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        if payload.action == "initiate_deletion":
            result = AccountService.initiate_deletion(db, current_user, payload.reason)
        elif payload.action == "cancel_deletion":
            result = AccountService.cancel_deletion(db, current_user)
        else:
            result = AccountService.delete_account_immediate(db, current_user)
        return {"success": True, "data": result}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Account deletion action {payload.action} failed for user {current_user.id}: {e}")
        raise UpstreamError("Internal server error")
