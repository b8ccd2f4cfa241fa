from pathlib import Path

import pytest

from image_enrichment.errors import ConfigError, InvalidOptionsConfig
from image_enrichment.utils.options import load_schema_file, parse_options_arg


def test_load_schema_file(tmp_path: Path):
    p = tmp_path / "schema.json"
    p.write_text('{"type": "object", "properties": {"caption": {"type": "string"}}}')
    assert load_schema_file(p)["type"] == "object"


def test_load_schema_missing_is_fatal(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_schema_file(tmp_path / "nope.json")


def test_load_schema_invalid_is_fatal(tmp_path: Path):
    p = tmp_path / "schema.json"
    p.write_text("{not json")
    with pytest.raises(ConfigError):
        load_schema_file(p)


def test_parse_options_object():
    assert parse_options_arg('{"temperature": 0.2, "num_ctx": 8192}') == {
        "temperature": 0.2,
        "num_ctx": 8192,
    }


@pytest.mark.parametrize("arg", [None, "", "   "])
def test_parse_options_absent(arg):
    assert parse_options_arg(arg) is None


@pytest.mark.parametrize("arg", ["{temperature: 1}", "[1, 2]", "3"])
def test_parse_options_invalid(arg):
    with pytest.raises(InvalidOptionsConfig):
        parse_options_arg(arg)
