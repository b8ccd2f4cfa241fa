from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import requests

from ..errors import MalformedResponse, ServerError, TransportError
from ..logging import get_logger

logger = get_logger(__name__)

__all__ = ["InferenceClient"]


def _abbreviate(payload: dict[str, Any]) -> dict[str, Any]:
    """Copy of the payload with base64 images replaced by their sizes."""
    out = dict(payload)
    out["messages"] = [
        {**m, "images": [f"<{len(img)} b64 chars>" for img in m.get("images", [])]}
        for m in payload.get("messages", [])
    ]
    return out


@dataclass
class InferenceClient:
    """Ollama-style chat endpoint client.

    Wraps a ``requests.Session`` and POSTs one JSON payload per call. No retries:
    every failure is raised to the caller as a pipeline error.
    """

    api_url: str
    timeout: float | None = None
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def chat(self, payload: dict[str, Any]) -> Any:
        logger.debug("request payload: %s", json.dumps(_abbreviate(payload), indent=2))
        try:
            resp = self.session.post(
                self.api_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        text = resp.text
        if not 200 <= resp.status_code < 300:
            logger.error("server said: %s", text)
            raise ServerError(resp.status_code, text)
        try:
            return json.loads(text)
        except ValueError as e:
            raise MalformedResponse(f"failed to parse JSON: {e}") from e

    def close(self) -> None:
        self.session.close()
