from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from .errors import ConfigError
from .utils.images import SUPPORTED_EXTS


def _is_image(path: str | Path) -> bool:
    return Path(path).suffix.lower().lstrip(".") in SUPPORTED_EXTS


def iter_images(input_dir: str | Path) -> Iterator[Path]:
    """Yield supported image files directly under ``input_dir``, sorted by name.

    Subdirectories are not descended into. An unreadable directory is fatal.
    """
    try:
        names = sorted(os.listdir(input_dir))
    except OSError as e:
        raise ConfigError(f"failed to read input directory {input_dir}: {e}") from e
    for name in names:
        fp = Path(input_dir) / name
        if fp.is_file() and _is_image(fp):
            yield fp
