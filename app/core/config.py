import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    ENV: str = os.getenv("ENV", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local")
    EMAIL_BACKEND: str = os.getenv("EMAIL_BACKEND", "console")

    # Database
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DATABASE_ECHO: bool = _bool("DATABASE_ECHO", "False")
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", 20))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", 10))

    # Auth provider (issues the JWTs we verify)
    AUTH_PROVIDER_URL: Optional[str] = os.getenv("AUTH_PROVIDER_URL")
    AUTH_PROVIDER_ANON_KEY: Optional[str] = os.getenv("AUTH_PROVIDER_ANON_KEY")
    AUTH_JWT_SECRET: Optional[str] = os.getenv("AUTH_JWT_SECRET")
    AUTH_JWT_ALGORITHM: str = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
    AUTH_JWT_AUDIENCE: str = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")

    # App identity / email
    APP_NAME: str = os.getenv("APP_NAME", "DevToolsHub")
    APP_URL: str = os.getenv("APP_URL", "http://localhost:3000")
    SENDER_NAME: str = os.getenv("SENDER_NAME", "DevToolsHub Team")
    FROM_EMAIL: str = os.getenv("FROM_EMAIL", "no-reply@devtoolshub.local")
    ADMIN_EMAIL: Optional[str] = os.getenv("ADMIN_EMAIL")

    SMTP_HOST: Optional[str] = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER: Optional[str] = os.getenv("SMTP_USER")
    SMTP_PASSWORD: Optional[str] = os.getenv("SMTP_PASSWORD")

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET: Optional[str] = os.getenv("STRIPE_WEBHOOK_SECRET")
    STRIPE_PREMIUM_PRICE_ID: Optional[str] = os.getenv("STRIPE_PREMIUM_PRICE_ID")
    STRIPE_PREMIUM_PRICE: Optional[str] = os.getenv("STRIPE_PREMIUM_PRICE")

    # AWS S3
    AWS_S3_BUCKET: Optional[str] = os.getenv("AWS_S3_BUCKET")
    AWS_REGION: Optional[str] = os.getenv("AWS_REGION")
    AWS_ACCESS_KEY_ID: Optional[str] = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_PUBLIC_BASE_URL: Optional[str] = os.getenv("AWS_PUBLIC_BASE_URL")

    # CORS
    BACKEND_CORS_ORIGINS: Optional[str] = os.getenv("BACKEND_CORS_ORIGINS")

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = _bool("RATE_LIMIT_ENABLED", "True")
    RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", 100))
    RATE_LIMIT_PERIOD_SECONDS: int = int(os.getenv("RATE_LIMIT_PERIOD_SECONDS", 60))
    SUPPORT_RATE_LIMIT: int = int(os.getenv("SUPPORT_RATE_LIMIT", 3))
    SUPPORT_RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("SUPPORT_RATE_LIMIT_WINDOW_SECONDS", 3600))

    # Support form captcha
    TURNSTILE_SECRET_KEY: Optional[str] = os.getenv("TURNSTILE_SECRET_KEY")

    # Redis / Celery
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    CELERY_BROKER_URL: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    CELERY_TASK_ALWAYS_EAGER: bool = _bool("CELERY_TASK_ALWAYS_EAGER", "False")


settings = Settings()
