"""
Media Storage

Uploads banner, course and event media to object storage through the
S3-compatible API (boto3). The default endpoint is Google Cloud Storage's
interoperability endpoint; any S3-compatible store works.

Objects are keyed ``<folder>/<epoch-ms>_<filename>`` and served from
``<storage_public_base_url>/<bucket>/<key>``.

boto3 is synchronous, so uploads run in a worker thread.
"""

import asyncio
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from academy.core.config import settings
from academy.core.exceptions import BadRequestError, ServiceUnavailableError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".mp4", ".mkv"})
CACHE_CONTROL = "public, max-age=31536000"

_client = None


class UnsupportedMediaTypeError(BadRequestError):
    def __init__(self, filename: str):
        super().__init__(
            f"Only images and videos are allowed ({', '.join(sorted(ALLOWED_EXTENSIONS))}): "
            f"{filename}",
            error_code="UNSUPPORTED_MEDIA_TYPE",
        )


@dataclass
class StoredMedia:
    key: str
    url: str
    content_type: str


def _get_client():
    """Lazily build the S3 client."""
    global _client
    if _client is None:
        _client = boto3.client(
            "s3",
            endpoint_url=settings.storage_endpoint_url or None,
            aws_access_key_id=settings.storage_access_key_id or None,
            aws_secret_access_key=settings.storage_secret_access_key or None,
            region_name=settings.storage_region,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
    return _client


def is_allowed_filename(filename: str | None) -> bool:
    if not filename:
        return False
    return os.path.splitext(filename)[1].lower() in ALLOWED_EXTENSIONS


def build_object_key(folder: str, filename: str, now_ms: int | None = None) -> str:
    """``<folder>/<epoch-ms>_<basename>``; directory parts of the filename are dropped."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    safe_name = os.path.basename(filename.replace("\\", "/")).replace(" ", "_")
    return f"{folder.strip('/')}/{timestamp}_{safe_name}"


def public_url(key: str) -> str:
    return f"{settings.storage_public_base_url.rstrip('/')}/{settings.storage_bucket}/{key}"


def _put_object(key: str, body: bytes, content_type: str) -> None:
    _get_client().put_object(
        Bucket=settings.storage_bucket,
        Key=key,
        Body=body,
        ContentType=content_type,
        CacheControl=CACHE_CONTROL,
    )


async def upload_media(upload: UploadFile, folder: str) -> StoredMedia:
    """
    Store an uploaded file and return its public location.

    Raises:
        UnsupportedMediaTypeError 400: Extension not in the allow-list
        ServiceUnavailableError 503: Storage rejected or could not be reached
    """
    if not is_allowed_filename(upload.filename):
        raise UnsupportedMediaTypeError(upload.filename or "")

    key = build_object_key(folder, upload.filename)
    content_type = upload.content_type or "application/octet-stream"
    body = await upload.read()

    try:
        await asyncio.to_thread(_put_object, key, body, content_type)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Media upload failed for {key}: {e}")
        raise ServiceUnavailableError(
            "Media upload failed. Please try again later.",
            error_code="STORAGE_UNAVAILABLE",
        ) from e

    logger.info(f"Uploaded media: {key} ({content_type}, {len(body)} bytes)")
    return StoredMedia(key=key, url=public_url(key), content_type=content_type)


def _delete_object(key: str) -> None:
    _get_client().delete_object(Bucket=settings.storage_bucket, Key=key)


async def discard_media(media: StoredMedia) -> None:
    """
    Remove an object stored for a request that then failed.

    A storage error here is logged rather than raised so the request's own
    error reaches the client.
    """
    try:
        await asyncio.to_thread(_delete_object, media.key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Could not discard orphaned media {media.key}: {e}")
        return
    logger.info(f"Discarded media: {media.key}")


async def read_form_payload(
    request: Request,
    file_field: str,
) -> tuple[dict[str, Any], UploadFile | None]:
    """
    Read a create/update body sent either as JSON or as a multipart form.

    Multipart fields arrive as strings; blank ones are dropped and values
    that look like JSON arrays (e.g. ``rooms``) are decoded.

    Returns:
        (fields, uploaded file or None)
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        fields: dict[str, Any] = {}
        upload: UploadFile | None = None

        for name, value in form.multi_items():
            if isinstance(value, StarletteUploadFile):
                if name == file_field and value.filename:
                    upload = value
                continue
            if value == "":
                continue
            if value.startswith("["):
                try:
                    value = json.loads(value)
                except ValueError as e:
                    raise BadRequestError(
                        f"Invalid list value for {name}.", error_code="INVALID_ARRAY"
                    ) from e
            if name in fields:
                existing = fields[name]
                fields[name] = (existing if isinstance(existing, list) else [existing]) + [value]
            else:
                fields[name] = value

        return fields, upload

    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequestError("Request body must be valid JSON.", error_code="INVALID_JSON") from e

    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object.", error_code="INVALID_JSON")
    return body, None
