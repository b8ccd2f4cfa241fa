from __future__ import annotations

from typing import Any, Mapping, Sequence

from .logging import get_logger
from .schemas import DEFAULT_PROMPT, ImageTask, InferenceRequest
from .utils.clients import InferenceClient

logger = get_logger(__name__)

__all__ = [
    "build_chat_request",
    "extract_contents",
    "caption_tasks",
]


def build_chat_request(
    model: str,
    prompt: str,
    images: Sequence[str],
    schema: Any | None = None,
    options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble a non-streaming chat payload with one user turn.

    ``schema`` goes to ``format`` and ``options`` to ``options`` verbatim.
    """
    req = InferenceRequest(
        model=model,
        prompt=prompt,
        images=list(images),
        response_schema=schema,
        options=dict(options) if options is not None else None,
    )
    return req.to_payload()


def extract_contents(response: Any) -> list[Any]:
    """Normalize a chat response into one content value per image.

    First match wins:
    1. ``messages`` is a list -> each entry's ``content`` (or "").
    2. ``message`` present -> its ``content`` (or "").
    3. anything else -> the whole response as the only value.
    """
    if isinstance(response, dict):
        messages = response.get("messages")
        if isinstance(messages, list):
            return [_content_of(m) for m in messages]
        if "message" in response:
            return [_content_of(response["message"])]
    return [response]


def _content_of(message: Any) -> Any:
    if isinstance(message, dict):
        return message.get("content", "")
    return ""


def caption_tasks(
    client: InferenceClient,
    tasks: Sequence[ImageTask],
    model: str,
    prompt: str = DEFAULT_PROMPT,
    schema: Any | None = None,
    options: Mapping[str, Any] | None = None,
) -> list[Any]:
    """Send all ``tasks`` in a single request and return the extracted contents."""
    payload = build_chat_request(
        model,
        prompt,
        [t.encoded_payload for t in tasks],
        schema=schema,
        options=options,
    )
    contents = extract_contents(client.chat(payload))
    logger.debug("got %d content value(s) for %d image(s)", len(contents), len(tasks))
    return contents
