from __future__ import annotations

import base64
from pathlib import Path

from ..errors import IOFailure, UnsupportedFormat
from ..schemas import ImageTask
from .paths import base_name_for

__all__ = [
    "MEDIA_TYPES",
    "SUPPORTED_EXTS",
    "media_type_for",
    "encode_image_file",
    "load_image_task",
]

MEDIA_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "bmp": "image/bmp",
    "gif": "image/gif",
    "webp": "image/webp",
}

SUPPORTED_EXTS = frozenset(MEDIA_TYPES)


def media_type_for(path: str | Path) -> str:
    """Map a file extension (case-insensitive) to its media type."""
    ext = Path(path).suffix.lower().lstrip(".")
    if not ext:
        raise UnsupportedFormat(f"missing image extension: {path}")
    try:
        return MEDIA_TYPES[ext]
    except KeyError:
        raise UnsupportedFormat(f"unsupported image extension: .{ext}") from None


def encode_image_file(path: str | Path) -> tuple[str, str]:
    """Read an image file and return ``(base64_str, media_type)``.

    The extension is checked before the file is opened.
    """
    media_type = media_type_for(path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise IOFailure(f"failed to read {path}: {e}") from e
    return base64.b64encode(data).decode("ascii"), media_type


def load_image_task(path: str | Path, base_name: str | None = None) -> ImageTask:
    b64, media_type = encode_image_file(path)
    return ImageTask(
        source_path=Path(path),
        base_name=base_name or base_name_for(path),
        encoded_payload=b64,
        media_type=media_type,
    )
