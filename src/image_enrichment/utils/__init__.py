from __future__ import annotations

from .clients import InferenceClient
from .concurrency import ProgressTracker, partition, run_batch
from .images import SUPPORTED_EXTS, encode_image_file, load_image_task, media_type_for
from .options import load_schema_file, parse_options_arg
from .paths import base_name_for, output_path

__all__ = [
    "InferenceClient",
    "ProgressTracker",
    "partition",
    "run_batch",
    "SUPPORTED_EXTS",
    "encode_image_file",
    "load_image_task",
    "media_type_for",
    "load_schema_file",
    "parse_options_arg",
    "base_name_for",
    "output_path",
]
