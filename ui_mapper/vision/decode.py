"""Turn uploaded image bytes into ``Raster`` values."""

from __future__ import annotations

import io
import random
import string
from collections.abc import Iterable

from PIL import Image, UnidentifiedImageError

from ..core.errors import DecodeError
from ..core.logger import log
from ..utils.file_utils import get_timestamp_ms
from .models import Raster

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_raster_id() -> str:
    """Return an id of the form ``sc-<epoch ms>-<9 base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))  # noqa: S311
    return f"sc-{get_timestamp_ms()}-{suffix}"


def decode_raster(name: str, data: bytes, *, raster_id: str | None = None) -> Raster:
    """Decode *data* and return an un-analyzed raster with its pixel size.

    Raises:
        DecodeError: The bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            width, height = image.size
            image_format = image.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Cannot decode {name!r}: {exc}") from exc

    if width <= 0 or height <= 0:
        raise DecodeError(f"Image {name!r} has no pixels")

    mime_type = Image.MIME.get(image_format or "", "application/octet-stream")
    raster = Raster(
        id=raster_id or new_raster_id(),
        name=name,
        width=width,
        height=height,
        payload=data,
        mime_type=mime_type,
    )
    log.debug(f"Decoded {name} as {mime_type} {width}x{height}")
    return raster


def decode_rasters(files: Iterable[tuple[str, bytes]]) -> tuple[list[Raster], list[str]]:
    """Decode a batch; undecodable files are skipped.

    Returns:
        ``(rasters, skipped_names)``
    """
    rasters: list[Raster] = []
    skipped: list[str] = []
    for name, data in files:
        try:
            rasters.append(decode_raster(name, data))
        except DecodeError as exc:
            log.warning(f"Skipping import: {exc}")
            skipped.append(name)
    return rasters, skipped
