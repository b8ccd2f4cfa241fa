from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import ConfigError, InvalidStructuredOutput, IOFailure
from .logging import get_logger
from .schemas import OutputRecord
from .utils.paths import output_path

logger = get_logger(__name__)

__all__ = [
	"resolve_output_value",
	"render_json",
	"JSONOutputWriter",
]


def _decode_structured(content: Any) -> Any:
	if not isinstance(content, str):
		return content
	try:
		return json.loads(content)
	except json.JSONDecodeError as e:
		raise InvalidStructuredOutput(str(e)) from e


def resolve_output_value(content: Any, structured: bool, name: str = "") -> Any:
	"""Decide the JSON value persisted for one content value.

	Stage 1 (schema requested) decodes the content as JSON, keeping the raw
	text on failure. Stage 2 decodes a still-string value once more and keeps
	the literal string when that fails.
	"""
	value = content
	if structured:
		try:
			value = _decode_structured(content)
		except InvalidStructuredOutput:
			logger.warning("response for %s is not valid JSON. storing raw text.", name or "item")
			value = content
	if isinstance(value, str):
		try:
			return json.loads(value)
		except json.JSONDecodeError:
			return value
	return value


def render_json(value: Any, pretty: bool) -> str:
	if pretty:
		return json.dumps(value, ensure_ascii=False, indent=2)
	return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class JSONOutputWriter:
	"""Write one JSON file per image into a flat output directory."""

	def __init__(self, output_dir: str | Path, suffix: str = "", pretty: bool = False) -> None:
		self.output_dir = Path(output_dir)
		self.suffix = suffix
		self.pretty = pretty
		try:
			os.makedirs(self.output_dir, exist_ok=True)
		except OSError as e:
			raise ConfigError(f"failed to create output directory {self.output_dir}: {e}") from e

	def path_for(self, base_name: str) -> Path:
		return output_path(self.output_dir, base_name, self.suffix)

	def exists(self, base_name: str) -> bool:
		return self.path_for(base_name).exists()

	def build(self, base_name: str, content: Any, structured: bool) -> OutputRecord:
		return OutputRecord(
			target_path=self.path_for(base_name),
			value=resolve_output_value(content, structured, name=base_name),
			pretty=self.pretty,
		)

	def write_record(self, record: OutputRecord) -> Path:
		"""Write via a temp file in the same dir so a failed write leaves no target behind."""
		text = render_json(record.value, record.pretty)
		target = Path(record.target_path)
		tmp_path = None
		try:
			fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
			with os.fdopen(fd, "w", encoding="utf-8") as f:
				f.write(text)
			os.chmod(tmp_path, 0o644)
			os.replace(tmp_path, target)
			tmp_path = None
		except OSError as e:
			raise IOFailure(f"failed to write {target}: {e}") from e
		finally:
			if tmp_path is not None:
				try:
					os.unlink(tmp_path)
				except FileNotFoundError:
					pass
		return target

	def write(self, base_name: str, content: Any, structured: bool = False) -> Path:
		return self.write_record(self.build(base_name, content, structured))
