from __future__ import annotations

import os
from pathlib import Path

__all__ = ["base_name_for", "output_path"]


def base_name_for(image_path: str | Path) -> str:
    """Derive the output base name from a local image path.

    - Uses the basename without its extension (``cat.final.jpg`` -> ``cat.final``).
    - Replaces path separators so the output never lands in a nested dir.
    """
    stem = os.path.splitext(os.path.basename(str(image_path)))[0] or "image"
    return stem.replace("/", "_").replace("\\", "_") or "image"


def output_path(output_dir: str | Path, base_name: str, suffix: str = "") -> Path:
    """Return ``{output_dir}/{base_name}{suffix}.json``."""
    return Path(output_dir) / f"{base_name}{suffix}.json"
