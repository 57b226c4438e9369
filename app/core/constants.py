"""Application constants: plan tiers, session limits and seed data."""
from enum import Enum


class PlanTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class ReconcileState(str, Enum):
    NO_CUSTOMER_REFERENCE = "no_customer_reference"
    NO_ACTIVE_SUBSCRIPTION = "customer_with_no_active_subscription"
    ACTIVE_SUBSCRIPTION = "customer_with_active_subscription"


# Session tracking
MAX_ACTIVE_SESSIONS = 5
DEVICE_HISTORY_LIMIT = 10
SESSION_STALE_DAYS = 30

ACCOUNT_DELETION_GRACE_DAYS = 30

AVATAR_MAX_BYTES = 5 * 1024 * 1024

# Stripe statuses that end premium access
ENDED_SUBSCRIPTION_STATUSES = ("canceled", "unpaid", "past_due")

DEFAULT_TIMEZONES = [
    {"timezone": "UTC", "label": "UTC", "display_order": 0, "is_default": True},
    {"timezone": "America/New_York", "label": "New York", "display_order": 1, "is_default": False},
    {"timezone": "Europe/London", "label": "London", "display_order": 2, "is_default": False},
    {"timezone": "Asia/Tokyo", "label": "Tokyo", "display_order": 3, "is_default": False},
]

DEFAULT_WORLD_CLOCK_CITIES = [
    {
        "city_id": "new-york",
        "city_name": "New York",
        "country": "United States",
        "country_code": "US",
        "timezone": "America/New_York",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "is_popular": True,
        "display_order": 0,
    },
    {
        "city_id": "london",
        "city_name": "London",
        "country": "United Kingdom",
        "country_code": "GB",
        "timezone": "Europe/London",
        "latitude": 51.5074,
        "longitude": -0.1278,
        "is_popular": True,
        "display_order": 1,
    },
    {
        "city_id": "tokyo",
        "city_name": "Tokyo",
        "country": "Japan",
        "country_code": "JP",
        "timezone": "Asia/Tokyo",
        "latitude": 35.6762,
        "longitude": 139.6503,
        "is_popular": True,
        "display_order": 2,
    },
]
