import os
import uuid
import logging
from pathlib import Path
from typing import Optional

import boto3
from fastapi import UploadFile

from app.core.config import settings

logger = logging.getLogger(__name__)

LOCAL_ROOT = Path("uploads")


def _get_s3_client():
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or os.getenv("AWS_SECRET_ACCESS_KEY"),
        region_name=settings.AWS_REGION or os.getenv("AWS_REGION", "us-east-1"),
    )


def _object_name(prefix: str, filename: Optional[str]) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{prefix}-{uuid.uuid4().hex}{ext}"


async def upload_avatar(file: UploadFile, user_id: str, contents: bytes) -> str:
    name = _object_name(user_id, file.filename)
    if settings.STORAGE_BACKEND == "local":
        return _upload_local(contents, "avatars", name)
    return _upload_s3(contents, "avatars", name, file.content_type)


def delete_avatar(url: str, user_id: str) -> bool:
    """Remove a previously uploaded avatar.

    Only objects whose name carries the owner's id are touched, so external
    avatar URLs (e.g. from the OAuth provider) are left alone.
    """
    name = url.rstrip("/").rsplit("/", 1)[-1]
    if not name or user_id not in name:
        return False

    if settings.STORAGE_BACKEND == "local":
        path = LOCAL_ROOT / "avatars" / name
        if path.exists():
            path.unlink()
        return True

    _get_s3_client().delete_object(Bucket=settings.AWS_S3_BUCKET, Key=f"avatars/{name}")
    return True


def _upload_local(contents: bytes, folder: str, name: str) -> str:
    base_dir = LOCAL_ROOT / folder
    base_dir.mkdir(parents=True, exist_ok=True)
    path = base_dir / name
    with path.open("wb") as f:
        f.write(contents)

    # Return a URL path your frontend can serve via static files
    return f"/static/{folder}/{name}"


def _upload_s3(contents: bytes, folder: str, name: str, content_type: Optional[str]) -> str:
    s3 = _get_s3_client()
    bucket = settings.AWS_S3_BUCKET or os.getenv("AWS_S3_BUCKET")
    key = f"{folder}/{name}"
    s3.put_object(
        Bucket=bucket,
        Key=key,
        Body=contents,
        ContentType=content_type or "application/octet-stream",
        CacheControl="max-age=3600",
    )

    base_url = settings.AWS_PUBLIC_BASE_URL
    if base_url:
        return f"{base_url.rstrip('/')}/{key}"

    return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"
