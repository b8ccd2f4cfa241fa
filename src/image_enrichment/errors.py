"""Exception types raised by the captioning pipeline.

Per-item errors are caught at the item boundary by the pipeline and logged;
``ConfigError`` is the only one that stops a run before it starts.
"""
from __future__ import annotations

__all__ = [
    "ImageEnrichmentError",
    "UnsupportedFormat",
    "IOFailure",
    "TransportError",
    "ServerError",
    "MalformedResponse",
    "MissingContent",
    "InvalidStructuredOutput",
    "InvalidOptionsConfig",
    "ConfigError",
]


class ImageEnrichmentError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedFormat(ImageEnrichmentError):
    """File extension is missing or not one of the supported image types."""


class IOFailure(ImageEnrichmentError):
    """An input image could not be read or an output file could not be written."""


class TransportError(ImageEnrichmentError):
    """The request never reached the endpoint or the connection failed."""


class ServerError(ImageEnrichmentError):
    """The endpoint answered with a non-success HTTP status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"HTTP error: {status}")
        self.status = status
        self.body = body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServerError):
            return NotImplemented
        return (self.status, self.body) == (other.status, other.body)

    def __hash__(self) -> int:
        return hash((self.status, self.body))


class MalformedResponse(ImageEnrichmentError):
    """The endpoint returned a success status but the body is not JSON."""


class MissingContent(ImageEnrichmentError):
    """The response carried no content value for an image of the request."""


class InvalidStructuredOutput(ImageEnrichmentError):
    """A schema was requested but the model's content is not valid JSON."""


class InvalidOptionsConfig(ImageEnrichmentError):
    """The user-supplied model options string is not a JSON object."""


class ConfigError(ImageEnrichmentError):
    """The run cannot start: unreadable schema, input dir or output dir."""
