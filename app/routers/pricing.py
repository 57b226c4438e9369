from fastapi import APIRouter
from app.services.billing_service import format_price, get_premium_price

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/premium")
async def premium_price():
    """Premium price for the pricing page (no auth)."""
    cents = get_premium_price()
    return {"success": True, "data": {"price": cents, "formatted": format_price(cents), "interval": "month"}}
