"""Pydantic models describing image tasks, requests, outcomes & run config."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PROMPT = "What do you see in this image?"
DEFAULT_API_URL = "http://localhost:11434/api/chat"


class ImageTask(BaseModel):
    """One encoded input image, ready to be sent."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    base_name: str
    encoded_payload: str = Field(..., repr=False)
    media_type: str


class InferenceRequest(BaseModel):
    model: str
    prompt: str
    images: list[str] = Field(..., repr=False)
    response_schema: Any | None = None
    options: dict[str, Any] | None = None

    @field_validator("images")
    @classmethod
    def _images_not_empty(cls, v: list[str]) -> list[str]:  # noqa: D401
        if not v:
            raise ValueError("a request needs at least one image")
        return v

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": self.prompt,
                    "images": list(self.images),
                }
            ],
            "stream": False,
        }
        if self.response_schema is not None:
            payload["format"] = self.response_schema
        if self.options is not None:
            payload["options"] = self.options
        return payload


class OutputRecord(BaseModel):
    target_path: Path
    value: Any = None
    pretty: bool = False


class ItemOutcome(BaseModel):
    """Terminal outcome of one image: a written file or an error, never both."""

    source_path: Path
    output_path: Path | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "ItemOutcome":  # noqa: D401
        if (self.output_path is None) == (self.error is None):
            raise ValueError("outcome needs exactly one of output_path or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None


class RunSummary(BaseModel):
    discovered: int = 0
    skipped: int = 0
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    batches: int = 0


class RunConfig(BaseModel):
    input_dir: Path
    api_url: str = DEFAULT_API_URL
    model: str
    prompt: str = DEFAULT_PROMPT
    output_dir: Path | None = None
    schema_obj: Any | None = None
    options: dict[str, Any] | None = None
    pretty_json: bool = False
    batch_size: int = 1
    skip_existing: bool = False
    suffix: str = ""
    request_mode: Literal["per-image", "per-batch"] = "per-image"
    timeout: float | None = None

    @field_validator("batch_size")
    @classmethod
    def _batch_size_positive(cls, v: int) -> int:  # noqa: D401
        if v < 1:
            raise ValueError("batch_size must be >= 1")
        return v

    @field_validator("timeout")
    @classmethod
    def _timeout_positive(cls, v: float | None) -> float | None:  # noqa: D401
        if v is not None and v <= 0:
            raise ValueError("timeout must be > 0")
        return v

    @property
    def target_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else self.input_dir

    @property
    def structured(self) -> bool:
        return self.schema_obj is not None
