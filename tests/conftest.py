"""Shared test fixtures for image-enrichment tests."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable

import pytest

from image_enrichment.schemas import RunConfig

# PNG signature followed by filler; the pipeline never decodes pixels.
_FAKE_PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


class FakeClient:
    """Stand-in for InferenceClient that records payloads instead of calling HTTP.

    ``respond`` receives each payload and returns the decoded response body (or raises).
    """

    def __init__(self, respond: Callable[[dict[str, Any]], Any] | None = None) -> None:
        self.respond = respond or (lambda payload: {"message": {"role": "assistant", "content": "a caption"}})
        self.payloads: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def chat(self, payload: dict[str, Any]) -> Any:
        with self._lock:
            self.payloads.append(payload)
        return self.respond(payload)

    def close(self) -> None:
        pass

    @property
    def calls(self) -> int:
        return len(self.payloads)


@pytest.fixture
def test_image_data() -> bytes:
    """Return test image data as bytes."""
    return _FAKE_PNG


@pytest.fixture
def create_test_images(tmp_path: Path, test_image_data: bytes):
    """Create image files (name includes extension) in a fresh input directory."""

    def _create_images(names: list[str]) -> Path:
        input_dir = tmp_path / "images"
        input_dir.mkdir(exist_ok=True)
        for name in names:
            (input_dir / name).write_bytes(test_image_data)
        return input_dir

    return _create_images


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def client_factory() -> type[FakeClient]:
    """Return the FakeClient class for tests that need a custom responder."""
    return FakeClient


@pytest.fixture
def make_config(tmp_path: Path):
    """Build a RunConfig for the given input dir with test defaults."""

    def _make(input_dir: Path, **overrides: Any) -> RunConfig:
        values: dict[str, Any] = {"input_dir": input_dir, "model": "test-model"}
        values.update(overrides)
        return RunConfig(**values)

    return _make
