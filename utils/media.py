"""Image download: file extension from the response content-type, dimensions read with Pillow."""

import re
from pathlib import Path
from typing import Optional

import httpx
from PIL import Image

from config import HTTP_TIMEOUT, HTTP_USER_AGENT

from .logging_config import get_logger

_log = get_logger(__name__)

_SUBTYPE = re.compile(r".+/(.+)$")


def extension_for(content_type: Optional[str]) -> str:
    """'.jpeg' for 'image/jpeg; charset=binary', '.unknown' when missing or malformed."""
    if not content_type:
        return ".unknown"
    match = _SUBTYPE.match(content_type.split(";", 1)[0].strip())
    return f".{match.group(1)}" if match else ".unknown"


def download_image(image_url: str, file_path: str | Path, client: Optional[httpx.Client] = None) -> dict:
    """
    Fetch image_url and save it as file_path plus an extension taken from the content-type.

    Returns {"path", "width", "height"}. HTTP errors (4xx/5xx, transport) propagate.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.Client(
            timeout=HTTP_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": HTTP_USER_AGENT},
        )
    try:
        response = client.get(image_url)
    finally:
        if owns_client:
            client.close()
    _log.info("image_download", extra={"url": image_url, "status_code": response.status_code})
    response.raise_for_status()

    path = Path(f"{file_path}{extension_for(response.headers.get('content-type'))}")
    path.write_bytes(response.content)

    with Image.open(path) as img:
        width, height = img.size
    _log.info("image_saved", extra={"image_path": str(path), "width": width, "height": height})
    return {"path": str(path), "width": width, "height": height}
