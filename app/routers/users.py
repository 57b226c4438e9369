"""Current user endpoints."""
from fastapi import APIRouter, Depends
from app.dependencies.auth import get_current_user
from app.models.user import User

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    return {
        "success": True,
        "data": {
            "id": current_user.id,
            "email": current_user.email,
            "name": current_user.name,
            "avatar_url": current_user.avatar_url,
            "plan": current_user.plan,
            "created_at": current_user.created_at,
        },
    }


@router.get("/me/plan")
async def get_my_plan(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": {"plan": current_user.plan, "is_premium": current_user.is_premium}}


@router.get("/me/admin-status")
async def get_admin_status(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": {"is_admin": current_user.is_admin}}
