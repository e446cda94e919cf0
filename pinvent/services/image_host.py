"""
Local image hosting for product pictures.

Files land under settings.UPLOAD_DIR/products and are served by the
/uploads static mount in main.py.
"""

import logging
import secrets
from pathlib import Path

from pinvent.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpg", "image/jpeg"}
SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]
PRODUCTS_SUBDIR = "products"


class ImageUploadError(Exception):
    pass


def file_size_formatter(num_bytes: int, decimals: int = 2) -> str:
    """Human readable size in powers of 1000, e.g. 2048 -> '2.05 KB'."""
    if num_bytes <= 0:
        return "0 Bytes"
    index = 0
    while num_bytes >= 1000 ** (index + 1) and index < len(SIZE_UNITS) - 1:
        index += 1
    value = round(num_bytes / 1000 ** index, decimals)
    # 2.50 -> 2.5, 3.00 -> 3
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".") if decimals else str(int(value))
    return f"{text} {SIZE_UNITS[index]}"


def _safe_filename(filename: str) -> str:
    name = Path(filename or "image").name
    return name.replace(" ", "_") or "image"


def store_image(content: bytes, filename: str, content_type: str) -> dict:
    """Write an uploaded image to disk and return its metadata.

    Raises ImageUploadError when the file cannot be written. Type and size
    checks happen in the product service before this is called.
    """
    upload_dir = Path(settings.UPLOAD_DIR) / PRODUCTS_SUBDIR
    stored_name = f"{secrets.token_hex(8)}_{_safe_filename(filename)}"

    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / stored_name).write_bytes(content)
    except OSError as e:
        logger.error("Could not store image %s: %s", filename, e)
        raise ImageUploadError(str(e)) from e

    logger.info("Stored image %s (%d bytes)", stored_name, len(content))
    return {
        "file_name": filename,
        "file_path": f"/uploads/{PRODUCTS_SUBDIR}/{stored_name}",
        "file_type": content_type,
        "file_size": file_size_formatter(len(content), 2),
    }
