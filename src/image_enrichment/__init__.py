"""image_enrichment package

High-level goal: batch-caption a folder of images by sending each one (base64) to an
Ollama-style chat endpoint, optionally constrained by a JSON schema, and write one JSON
file per image.

Public entry points kept minimal. Most users interact through the CLI (`image-enrichment`).
"""
from .schemas import ImageTask, InferenceRequest, ItemOutcome, OutputRecord, RunConfig, RunSummary  # re-export core models
from .pipeline import process_images

__all__ = [
    "ImageTask",
    "InferenceRequest",
    "ItemOutcome",
    "OutputRecord",
    "RunConfig",
    "RunSummary",
    "process_images",
]
