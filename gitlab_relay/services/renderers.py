"""Render assembled content blocks into each chat platform's wire format.

* WeCom (WxWork) group robots take a single markdown string.
* Feishu custom bots take a "post" rich-text document: a title plus a list
  of lines, each a list of ``text`` / ``a`` elements.

Both renderers return ``None`` when there is nothing to send.
"""

from __future__ import annotations

from typing import Any

from gitlab_relay.services.blocks import (
    Assembly,
    BlockKind,
    ContentBlock,
    Link,
    Span,
    Status,
    Text,
    TextStyle,
)
from gitlab_relay.services.classifier import ObjectKind

MARKDOWN_SEPARATOR = "\n\n"
POST_LOCALE = "zh_cn"

POST_TITLES = {
    ObjectKind.PUSH: "code push",
    ObjectKind.PIPELINE: "pipeline status update",
    ObjectKind.MERGE_REQUEST: "merge request",
    ObjectKind.TAG_PUSH: "tag created/deleted",
}

JSONDict = dict[str, Any]


def _markdown_span(span: Span) -> str:
    match span:
        case Link(text=text, href=href):
            return f"[{text}]({href})"
        case Status(info=info):
            return f'<font color="{info.color}">{info.label}</font>'
        case Text(text=text, style=TextStyle.BOLD):
            return f"**{text}**"
        case Text(text=text, style=TextStyle.CODE):
            return f"`{text}`"
        case Text(text=text):
            return text


def _markdown_block(block: ContentBlock) -> str:
    body = "".join(_markdown_span(span) for span in block.spans)
    if block.kind is BlockKind.QUOTE:
        return f"> {body}"
    if block.kind is BlockKind.HEADING:
        return f"**{body}**"
    return body


def render_markdown(assembly: Assembly) -> JSONDict | None:
    """Render a WeCom markdown message."""
    if assembly.suppressed or assembly.is_empty:
        return None
    content = MARKDOWN_SEPARATOR.join(_markdown_block(block) for block in assembly.blocks)
    return {"msgtype": "markdown", "markdown": {"content": content}}


def _post_span(span: Span) -> JSONDict:
    match span:
        case Link(text=text, href=href):
            return {"tag": "a", "text": text, "href": href}
        case Status(info=info):
            label = f"{info.icon} {info.label}" if info.icon else info.label
            return {"tag": "text", "text": label}
        case Text(text=text):
            return {"tag": "text", "text": text}


def post_title(kind: ObjectKind, path_with_namespace: str) -> str:
    title = POST_TITLES.get(kind)
    if title is None:
        return "GitLab notification"
    return f"{path_with_namespace}: {title}"


def render_post(assembly: Assembly, title: str) -> JSONDict | None:
    """Render a Feishu ``post`` message with the given title."""
    if assembly.suppressed or assembly.is_empty:
        return None
    content = [[_post_span(span) for span in block.spans] for block in assembly.blocks]
    return {
        "msg_type": "post",
        "content": {"post": {POST_LOCALE: {"title": title, "content": content}}},
    }
