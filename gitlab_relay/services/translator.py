"""Translate a raw GitLab webhook payload into a chat platform message.

Pure and synchronous: classification, assembly and rendering never perform
I/O, so the translator is safe to call concurrently for every platform.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Any, assert_never

from gitlab_relay.schemas.delivery import Platform
from gitlab_relay.schemas.events import (
    Event,
    MergeRequestEvent,
    PipelineEvent,
    PushEvent,
    TagPushEvent,
)
from gitlab_relay.services.assemblers import (
    assemble_merge_request,
    assemble_pipeline,
    assemble_push,
    assemble_tag_push,
)
from gitlab_relay.services.blocks import Assembly
from gitlab_relay.services.classifier import ObjectKind, Unsupported, classify
from gitlab_relay.services.renderers import post_title, render_markdown, render_post


class Outcome(str, Enum):
    MESSAGE = "message"
    SUPPRESSED = "suppressed"
    EMPTY = "empty"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class TranslationResult:
    """Result of translating one payload for one platform.

    ``document`` is set only when ``outcome`` is ``Outcome.MESSAGE``.
    """

    outcome: Outcome
    document: dict[str, Any] | None = None

    @property
    def has_message(self) -> bool:
        return self.outcome is Outcome.MESSAGE


def assemble(event: Event, tz: tzinfo | None = None) -> Assembly:
    """Dispatch *event* to the assembler for its kind."""
    match event:
        case PushEvent():
            return assemble_push(event)
        case TagPushEvent():
            return assemble_tag_push(event)
        case MergeRequestEvent():
            return assemble_merge_request(event, tz)
        case PipelineEvent():
            return assemble_pipeline(event)
        case _:
            assert_never(event)


def render(event: Event, assembly: Assembly, platform: Platform) -> dict[str, Any] | None:
    match platform:
        case Platform.WXWORK:
            return render_markdown(assembly)
        case Platform.FEISHU:
            title = post_title(ObjectKind(event.object_kind), event.project.path_with_namespace)
            return render_post(assembly, title)
        case _:
            assert_never(platform)


def translate(payload: Any, platform: Platform, *, tz: tzinfo | None = None) -> TranslationResult:
    """Translate *payload* into *platform*'s message document.

    Raises:
        MissingFieldError: A field the message needs is absent from the payload.
        MalformedPayloadError: A field the message needs has the wrong shape.
    """
    event = classify(payload)
    if isinstance(event, Unsupported):
        return TranslationResult(Outcome.UNSUPPORTED)

    assembly = assemble(event, tz)
    if assembly.suppressed:
        return TranslationResult(Outcome.SUPPRESSED)

    document = render(event, assembly, platform)
    if document is None:
        return TranslationResult(Outcome.EMPTY)
    return TranslationResult(Outcome.MESSAGE, document)
