"""Client-side upload checks, run before any network call."""

from __future__ import annotations

import math

from frext.core.logging import get_logger
from frext.domain.constants import ALLOWED_IMAGE_TYPES, MAX_UPLOAD_BYTES
from frext.domain.errors import UploadValidationError
from frext.domain.models import UploadFile
from frext.observability.errors import message_for

logger = get_logger(__name__)

_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Human-readable size, e.g. ``15728640 -> "15 MB"``, ``1536 -> "1.5 KB"``."""
    if size <= 0:
        return "0 Bytes"
    i = 0
    while i < len(_UNITS) - 1 and size >= 1024 ** (i + 1):
        i += 1
    # half-up rounding to two decimals
    value = math.floor(size / 1024**i * 100 + 0.5) / 100
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_UNITS[i]}"


def is_allowed_type(file: UploadFile) -> bool:
    return file.content_type in ALLOWED_IMAGE_TYPES


def validate_upload(file: UploadFile, *, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    if file.size > max_bytes:
        logger.info(
            "upload_rejected_size",
            extra={"upload_name": file.filename, "size_bytes": file.size, "max_bytes": max_bytes},
        )
        raise UploadValidationError(
            message_for(
                "FILE_TOO_LARGE",
                limit=format_file_size(max_bytes).replace(" ", ""),
                size=format_file_size(file.size),
            ),
            code="FILE_TOO_LARGE",
        )
    if not is_allowed_type(file):
        logger.info(
            "upload_rejected_type",
            extra={"upload_name": file.filename, "content_type": file.content_type},
        )
        raise UploadValidationError(message_for("UNSUPPORTED_FILE_TYPE"), code="UNSUPPORTED_FILE_TYPE")
