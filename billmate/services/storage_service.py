"""
Payment slip storage on Cloudflare R2 (S3-compatible).
Uses global config; the boto3 client is built per upload and runs in a thread.
"""
import asyncio
import base64
import binascii
from io import BytesIO
from typing import Tuple
from uuid import uuid4

import boto3
from botocore.exceptions import ClientError

from billmate.config import settings
from billmate.core.exceptions import DomainValidationError

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def _r2_client():
    if not settings.R2_ACCOUNT_ID or not settings.R2_ACCESS_KEY_ID or not settings.R2_SECRET_ACCESS_KEY:
        raise RuntimeError(
            "R2 storage not configured: set R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY"
        )
    return boto3.client(
        service_name="s3",
        endpoint_url=f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        region_name="auto",
        config=boto3.session.Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


def public_url(key: str) -> str:
    base = settings.STORAGE_PUBLIC_BASE_URL.rstrip("/")
    key = key.lstrip("/")
    return f"{base}/{key}" if key else base


def decode_slip(slip_base64: str, content_type: str) -> Tuple[bytes, str]:
    """
    Decode a base64 slip image (a ``data:image/...;base64,`` prefix is allowed).

    Returns the raw bytes and the file extension.
    """
    if slip_base64.startswith("data:"):
        header, _, slip_base64 = slip_base64.partition(",")
        content_type = header[5:].split(";", 1)[0] or content_type

    ext = _EXTENSIONS.get(content_type.lower())
    if ext is None:
        raise DomainValidationError("รองรับเฉพาะไฟล์รูปภาพ JPG, PNG หรือ WEBP")

    try:
        content = base64.b64decode(slip_base64, validate=True)
    except (binascii.Error, ValueError):
        raise DomainValidationError("ไฟล์สลิปไม่ถูกต้อง")
    if not content:
        raise DomainValidationError("ไฟล์สลิปไม่ถูกต้อง")
    if len(content) > settings.MAX_SLIP_BYTES:
        raise DomainValidationError("ไฟล์สลิปมีขนาดใหญ่เกินไป")
    return content, ext


async def upload(key_prefix: str, ext: str, content: bytes, content_type: str) -> str:
    """
    Upload bytes to R2 under ``{key_prefix}/{uuid}.{ext}`` and return the public URL.
    """
    object_name = f"{key_prefix}/{uuid4().hex}.{ext}"
    client = _r2_client()
    bucket = settings.R2_BUCKET_NAME

    def _put():
        try:
            client.upload_fileobj(
                BytesIO(content),
                bucket,
                object_name,
                ExtraArgs={"ContentType": content_type},
            )
        except ClientError as e:
            raise RuntimeError(f"Storage upload failed: {e}") from e

    await asyncio.to_thread(_put)
    return public_url(object_name)
