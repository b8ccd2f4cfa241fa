"""Tests for schema validation of run config and records."""

from __future__ import annotations

from pathlib import Path

import pytest

from image_enrichment.schemas import (
    DEFAULT_API_URL,
    DEFAULT_PROMPT,
    InferenceRequest,
    ItemOutcome,
    RunConfig,
)


class TestRunConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        cfg = RunConfig(input_dir=tmp_path, model="m")

        assert cfg.api_url == DEFAULT_API_URL
        assert cfg.prompt == DEFAULT_PROMPT
        assert cfg.batch_size == 1
        assert cfg.suffix == ""
        assert cfg.request_mode == "per-image"
        assert cfg.target_dir == tmp_path
        assert cfg.structured is False

    def test_output_dir_overrides_target(self, tmp_path: Path) -> None:
        cfg = RunConfig(input_dir=tmp_path, model="m", output_dir=tmp_path / "out", schema_obj={})
        assert cfg.target_dir == tmp_path / "out"
        assert cfg.structured is True

    @pytest.mark.parametrize(
        "field,value",
        [
            ("batch_size", 0),
            ("batch_size", -3),
            ("timeout", 0),
            ("request_mode", "per-everything"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, field: str, value) -> None:
        with pytest.raises(ValueError):
            RunConfig(input_dir=tmp_path, model="m", **{field: value})

    def test_model_required(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            RunConfig(input_dir=tmp_path)  # type: ignore[call-arg]


class TestItemOutcome:
    def test_success(self) -> None:
        o = ItemOutcome(source_path=Path("a.jpg"), output_path=Path("a.json"))
        assert o.ok

    def test_failure(self) -> None:
        o = ItemOutcome(source_path=Path("a.jpg"), error="ServerError: HTTP error: 500")
        assert not o.ok

    @pytest.mark.parametrize(
        "output_path,error",
        [(None, None), (Path("a.json"), "boom")],
    )
    def test_exactly_one_terminal_state(self, output_path, error) -> None:
        with pytest.raises(ValueError):
            ItemOutcome(source_path=Path("a.jpg"), output_path=output_path, error=error)


def test_inference_request_payload_omits_unset_fields() -> None:
    req = InferenceRequest(model="m", prompt="p", images=["AAA"])
    payload = req.to_payload()
    assert "format" not in payload
    assert "options" not in payload
    assert payload["messages"][0]["role"] == "user"
