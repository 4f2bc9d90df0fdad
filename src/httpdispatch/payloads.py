"""Payload types a handler can return to pick the shape of a successful response.

Returning any other value wraps it in a Response envelope: ``{"data": value}``.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Response:
    """Default JSON envelope. ``meta`` is only written when set."""

    data: Any = None
    meta: Any = None


@dataclass
class Raw:
    """Written as ``data`` itself, without the envelope."""

    data: Any = None


@dataclass
class RawWithOptions:
    """Raw body with an explicit content type and extra headers.

    ``str`` and ``bytes`` data are written verbatim, anything else as JSON.
    """

    data: Any = None
    content_type: str = "application/json"
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class Template:
    """A ``$name`` style template file rendered with ``data``.

    ``directory`` defaults to the configured template directory.
    """

    file: str
    data: dict[str, Any] = field(default_factory=dict)
    directory: str | None = None
    content_type: str = "text/html"


@dataclass
class File:
    """In-memory file contents written with their content type."""

    content: bytes
    content_type: str = "application/octet-stream"
