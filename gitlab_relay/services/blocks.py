"""Platform-neutral message content produced by the assemblers.

A message is an ordered tuple of ``ContentBlock`` lines. Each block holds
inline spans: plain or styled ``Text``, ``Link`` and ``Status`` badges. The
platform renderers decide how each of those looks on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gitlab_relay.services.formatting import StatusInfo


class TextStyle(str, Enum):
    PLAIN = "plain"
    BOLD = "bold"
    CODE = "code"


class BlockKind(str, Enum):
    """How a block sits in the message: header line, quoted detail, or heading."""

    LINE = "line"
    QUOTE = "quote"
    HEADING = "heading"


@dataclass(frozen=True)
class Text:
    text: str
    style: TextStyle = TextStyle.PLAIN


@dataclass(frozen=True)
class Link:
    text: str
    href: str


@dataclass(frozen=True)
class Status:
    info: StatusInfo


Span = Text | Link | Status


@dataclass(frozen=True)
class ContentBlock:
    spans: tuple[Span, ...]
    kind: BlockKind = BlockKind.LINE


def line(*spans: Span) -> ContentBlock:
    return ContentBlock(spans=spans)


def quote(*spans: Span) -> ContentBlock:
    return ContentBlock(spans=spans, kind=BlockKind.QUOTE)


def heading(text: str) -> ContentBlock:
    return ContentBlock(spans=(Text(text),), kind=BlockKind.HEADING)


def item(label: str, *spans: Span) -> ContentBlock:
    """Quoted ``label: value`` detail line."""
    return quote(Text(f"{label}: "), *spans)


@dataclass(frozen=True)
class Assembly:
    """Assembler output: the blocks to render, or a suppression decision."""

    blocks: tuple[ContentBlock, ...] = ()
    suppressed: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.blocks
