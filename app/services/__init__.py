"""Service layer package."""

__all__ = [
    "user_service",
    "auth_service",
    "session_service",
    "subscription_service",
    "billing_service",
    "profile_service",
    "account_service",
    "timezone_service",
    "world_clock_service",
    "jwt_snippet_service",
    "email_service",
    "storage_service",
    "captcha_service",
]
