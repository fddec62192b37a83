"""Classify raw GitLab webhook payloads into typed events.

Only the ``object_kind`` discriminator decides whether a payload is handled.
Kinds GitLab sends that have no notification yet (issues, notes, wiki pages,
standalone builds) and anything unrecognised classify as ``UNSUPPORTED``,
which callers treat as "no message" rather than an error.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

from pydantic import TypeAdapter, ValidationError

from gitlab_relay.schemas.events import Event


class ObjectKind(str, Enum):
    """Every ``object_kind`` value GitLab webhooks carry."""

    PUSH = "push"
    TAG_PUSH = "tag_push"
    ISSUE = "issue"
    NOTE = "note"
    MERGE_REQUEST = "merge_request"
    WIKI_PAGE = "wiki_page"
    PIPELINE = "pipeline"
    BUILD = "build"


SUPPORTED_KINDS: Final = frozenset(
    {
        ObjectKind.PUSH,
        ObjectKind.TAG_PUSH,
        ObjectKind.MERGE_REQUEST,
        ObjectKind.PIPELINE,
    }
)


class MalformedPayloadError(ValueError):
    """Raised when a supported event payload does not match its schema."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed payload field '{field}': {reason}")


class MissingFieldError(MalformedPayloadError):
    """Raised when a field required to build the message is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(field, "field required")
        self.args = (f"Missing required field '{field}'",)


class Unsupported:
    """Sentinel type for payloads that produce no message."""

    _instance: Unsupported | None = None

    def __new__(cls) -> Unsupported:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSUPPORTED"


UNSUPPORTED: Final = Unsupported()

_event_adapter: TypeAdapter[Event] = TypeAdapter(Event)


def _field_path(loc: tuple[int | str, ...]) -> str:
    # The first location element is the union tag pydantic adds.
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


def classify(payload: Any) -> Event | Unsupported:
    """Return the typed event for *payload*, or ``UNSUPPORTED``.

    Raises:
        MissingFieldError: A required field of a supported kind is absent.
        MalformedPayloadError: A field of a supported kind has the wrong shape.
    """
    if not isinstance(payload, dict):
        return UNSUPPORTED

    try:
        kind = ObjectKind(payload.get("object_kind"))
    except ValueError:
        return UNSUPPORTED
    if kind not in SUPPORTED_KINDS:
        return UNSUPPORTED

    try:
        return _event_adapter.validate_python(payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = _field_path(error["loc"])
        if error["type"] == "missing":
            raise MissingFieldError(field) from None
        raise MalformedPayloadError(field, error["msg"]) from None
