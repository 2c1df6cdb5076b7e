import logging
import json
from typing import Any, Optional


class CheckerError(Exception):
    """Base class for every failure the client surfaces."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class TransportError(CheckerError):
    """The analysis service could not be reached."""


class ValidationError(CheckerError):
    """
    The input was rejected, either by the backend (400/422) or by local
    request validation. ``detail`` is a message, a list of field errors or a
    structured object.
    """


class NotFoundError(CheckerError):
    """Unknown task, or a task whose analysis is not complete."""


class ServiceError(CheckerError):
    """Any other non-2xx status, or a response body of the wrong shape."""


class EmptyInputError(CheckerError):
    """Client-side guard. Never reaches the network."""


class UnsupportedFileTypeError(CheckerError):
    """Rejected by the accepted-type filter before any dispatch."""


def describe_error(error: Exception, fallback: str) -> str:
    """
    Collapse a failure into the single message shown to the user.

    A list of field errors becomes their messages joined with ", ", a
    structured object is JSON-serialized, a plain detail is used verbatim.
    """
    detail: Optional[Any] = getattr(error, "detail", None)

    if isinstance(detail, list):
        messages = [
            str(item.get("msg", "")) if isinstance(item, dict) else str(item)
            for item in detail
        ]
        messages = [m for m in messages if m]
        if messages:
            return ", ".join(messages)
        return fallback
    if isinstance(detail, dict):
        return json.dumps(detail)
    if detail:
        return str(detail)

    message = getattr(error, "message", None) or str(error)
    return message or fallback


def log_alert(message: str) -> None:
    """Default blocking-alert sink when no front end is attached."""
    logging.getLogger("plagiarism_client").error(message)
