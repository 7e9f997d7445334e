"""Create/update bodies that may carry an uploaded media file."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TypeVar

from fastapi import Request

from academy.core.storage import discard_media, read_form_payload, upload_media
from academy.modules.shared.schemas import CamelModel, parse_payload

MediaSchemaT = TypeVar("MediaSchemaT", bound=CamelModel)


@asynccontextmanager
async def media_payload(
    request: Request,
    schema: type[MediaSchemaT],
    *,
    file_field: str,
    folder: str,
) -> AsyncIterator[MediaSchemaT]:
    """
    Parse a JSON or multipart body into ``schema``.

    When a file is posted under ``file_field`` it is uploaded to ``folder``
    and its public URL and MIME type replace ``mediaUrl``/``mediaType``.
    If the block using the payload raises, the uploaded object is removed
    again before the error propagates.

    Usage:
        async with media_payload(request, BannerPayload, file_field="banner",
                                 folder="banners") as payload:
            banner = await service.create_banner(db, payload, admin)
    """
    fields, upload = await read_form_payload(request, file_field)
    payload = parse_payload(schema, fields)

    if upload is None:
        yield payload
        return

    media = await upload_media(upload, folder)
    payload.media_url = media.url
    payload.media_type = media.content_type

    try:
        yield payload
    except Exception:
        await discard_media(media)
        raise
