"""Models package placeholder."""

__all__ = [
    "base",
    "user",
    "session",
    "notification",
    "preferences",
    "account_deletion",
    "timezones",
    "jwt_snippets",
]
