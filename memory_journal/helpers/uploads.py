"""
==========================
Helpers - Image Uploads
==========================

Stores images uploaded with a memory under the public uploads directory and returns the stable
relative path that is saved in the memory row.

Usage:
>>> from memory_journal.helpers.uploads import save_upload
>>> save_upload(request.files["image"])
'/uploads/1725184800000-123456789.webp'

*Author: Sudharshan TK*\n
*Created: 2025-09-06*
"""

import os
import random

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

import memory_journal.helpers.config as cfg
from memory_journal.helpers.general import now_ms
from memory_journal.logger import logger


def unique_upload_name(original_name: str) -> str:
    ext = os.path.splitext(secure_filename(original_name or ""))[1].lower()
    return f"{now_ms()}-{random.randint(0, 10 ** 9)}{ext}"


def save_upload(file: FileStorage) -> str:
    """
    Save an uploaded image with a unique name.

    Args:
        file (FileStorage): uploaded file from the request.

    Returns:
        str: relative URL path, e.g. `/uploads/<name>`.
    """
    os.makedirs(cfg.UPLOADS_DIR, exist_ok=True)
    name = unique_upload_name(file.filename)
    file.save(os.path.join(cfg.UPLOADS_DIR, name))
    logger.info("Saved upload %s", name)
    return f"/uploads/{name}"
