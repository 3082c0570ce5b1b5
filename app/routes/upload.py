import logging
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from ..auth import get_current_user
from ..config import (
    STORAGE_ACCESS_KEY_ID,
    STORAGE_BUCKET_NAME,
    STORAGE_ENDPOINT_URL,
    STORAGE_REGION,
    STORAGE_SECRET_ACCESS_KEY,
)
from ..models import ROLE_ADMIN, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

__all__ = ["router", "get_storage_client", "generate_presigned_url", "presign_stored_key", "STORAGE_BUCKET_NAME"]

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
DOCUMENT_TYPES = {**IMAGE_TYPES, "application/pdf": "pdf"}

# Upload kind -> allowed content types (mapped to the stored extension)
UPLOAD_KINDS = {
    "profile-picture": IMAGE_TYPES,
    "document": DOCUMENT_TYPES,
    "itinerary-image": IMAGE_TYPES,
}


def get_storage_client():
    """Create and return an S3-compatible storage client."""
    return boto3.client(
        "s3",
        endpoint_url=STORAGE_ENDPOINT_URL,
        aws_access_key_id=STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
        region_name=STORAGE_REGION,
        config=Config(signature_version="s3v4"),
    )


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned URL for accessing a private object in the bucket."""
    client = get_storage_client()
    params = {"Bucket": STORAGE_BUCKET_NAME, "Key": key}

    # Images and PDFs are shown in the browser rather than downloaded
    params["ResponseContentDisposition"] = "inline"

    try:
        url = client.generate_presigned_url(
            "get_object",
            Params=params,
            ExpiresIn=expiration,
        )
        logger.info(f"✅ Generated presigned URL for key: {key}")
        return url
    except Exception as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise


def presign_stored_key(key: Optional[str]) -> Optional[str]:
    """Fresh presigned link for a stored key, or None when there is no key or signing fails"""
    if not key:
        return None
    try:
        return generate_presigned_url(key)
    except Exception as e:
        logger.warning(f"⚠️ Failed to generate presigned URL for {key}: {e}")
        return None


def parse_object_key(key: str) -> tuple[str, str]:
    """Split a stored key into (kind, owner user id); raises 400 for anything we did not issue"""
    parts = key.split("/") if key else []
    if (
        len(parts) != 3
        or parts[0] not in UPLOAD_KINDS
        or not all(parts)
        or ".." in key
        or len(key) > 512
    ):
        raise HTTPException(status_code=400, detail="Invalid file key")
    return parts[0], parts[1]


def build_object_key(kind: str, user_id: str, extension: str) -> str:
    """Keys are <kind>/<user_id>/<uuid>.<ext>; the user id comes from the verified token"""
    return f"{kind}/{user_id}/{uuid.uuid4()}.{extension}"


@router.post("/{kind}")
async def upload_file(
    kind: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    """Upload a profile picture, verification document or itinerary image (private)."""
    allowed_types = UPLOAD_KINDS.get(kind)
    if allowed_types is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown upload type. Use one of: {', '.join(UPLOAD_KINDS)}",
        )

    logger.info(f"📤 Uploading {kind} for user {current_user.id}")

    if file.content_type not in allowed_types:
        allowed = "JPEG, PNG, WebP or PDF" if kind == "document" else "JPEG, PNG or WebP"
        raise HTTPException(
            status_code=400, detail=f"Invalid file type. Only {allowed} files are allowed."
        )

    if file.filename and len(file.filename) > 255:
        raise HTTPException(status_code=400, detail="Filename too long - maximum 255 characters")

    contents = await file.read()

    if not contents:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if len(contents) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds 5MB limit. Your file is {len(contents) / (1024 * 1024):.2f}MB.",
        )

    key = build_object_key(kind, current_user.id, allowed_types[file.content_type])

    try:
        client = get_storage_client()
        client.put_object(
            Bucket=STORAGE_BUCKET_NAME,
            Key=key,
            Body=contents,
            ContentType=file.content_type,
        )
        presigned_url = generate_presigned_url(key)
    except Exception as e:
        logger.error(f"❌ Upload failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Upload failed") from e

    logger.info(f"✅ Stored {kind} at {key}")
    return {"key": key, "url": presigned_url}


@router.get("/presigned")
async def get_presigned_url_endpoint(
    key: str = Query(..., max_length=512),
    current_user: User = Depends(get_current_user),
):
    """Get a fresh presigned URL for a stored file.

    Verification documents are readable only by their owner and admins.
    Profile pictures and itinerary images are shown to any signed-in user.
    """
    kind, owner_id = parse_object_key(key)

    if kind == "document" and current_user.id != owner_id and current_user.role != ROLE_ADMIN:
        logger.warning(f"🚫 User {current_user.id} denied access to document {key}")
        raise HTTPException(status_code=403, detail="You do not have access to this file")

    try:
        presigned_url = generate_presigned_url(key)
    except Exception as e:
        raise HTTPException(status_code=500, detail="Failed to generate URL") from e

    return {"key": key, "url": presigned_url}
