"""Build platform-neutral message blocks for each supported GitLab event.

Every assembler is a pure function of the event: it returns a fresh
``Assembly`` and never touches shared state, so both platform renderers can
consume the same output.
"""

from __future__ import annotations

from datetime import tzinfo

from gitlab_relay.schemas.events import (
    Build,
    Commit,
    MergeRequestEvent,
    PipelineEvent,
    Project,
    PushEvent,
    TagPushEvent,
)
from gitlab_relay.services.blocks import (
    Assembly,
    ContentBlock,
    Link,
    Status,
    Text,
    TextStyle,
    heading,
    item,
    line,
    quote,
)
from gitlab_relay.services.formatting import (
    IN_FLIGHT_STATUSES,
    collapse_whitespace,
    count_changes,
    format_duration,
    format_merge_state,
    format_source,
    format_status,
    format_timestamp,
    ref_operation,
    strip_ref,
)

_BRANCH_OPERATIONS = {"created": "created branch", "deleted": "deleted branch", None: "pushed to"}
_TAG_OPERATIONS = {"created": "created tag", "deleted": "deleted tag", None: "tag"}


def _code(text: str) -> Text:
    return Text(text, TextStyle.CODE)


def _project_line(project: Project) -> ContentBlock:
    return quote(
        Text("Project "),
        Link(f"{project.name} | {project.path_with_namespace}", project.web_url),
    )


def _commit_spans(commit: Commit) -> tuple[Text, Link]:
    return Text(f"{commit.author.name}: "), Link(collapse_whitespace(commit.message), commit.url)


def _commit_summary(commits: list[Commit], total_commits_count: int) -> list[ContentBlock]:
    if total_commits_count <= 0:
        return []
    changes = count_changes(commits)
    blocks = [
        heading(f"{total_commits_count} commit(s) in total:"),
        quote(
            Text("added: "),
            _code(str(changes.added)),
            Text(" modified: "),
            _code(str(changes.modified)),
            Text(" removed: "),
            _code(str(changes.removed)),
        ),
    ]
    blocks.extend(quote(*_commit_spans(commit)) for commit in commits)
    return blocks


def assemble_push(event: PushEvent) -> Assembly:
    """Header, project line, and commit summary for a branch push."""
    branch = strip_ref(event.ref)
    project = event.project
    operation = _BRANCH_OPERATIONS[ref_operation(event.before, event.after)]

    blocks = [
        line(
            Text(f"{event.user_name} {operation} "),
            Link(f"{project.path_with_namespace}/{branch}", f"{project.web_url}/tree/{branch}"),
        ),
        _project_line(project),
    ]
    blocks.extend(_commit_summary(event.commits, event.total_commits_count))
    return Assembly(blocks=tuple(blocks))


def assemble_tag_push(event: TagPushEvent) -> Assembly:
    """Header, project line, tag message, and commit summary for a tag push."""
    tag = strip_ref(event.ref)
    project = event.project
    operation = _TAG_OPERATIONS[ref_operation(event.before, event.after)]

    blocks = [
        line(
            Text(f"{event.user_name} {operation} "),
            Link(f"{project.path_with_namespace}/{tag}", f"{project.web_url}/-/tags/{tag}"),
        ),
        _project_line(project),
    ]
    if event.message:
        blocks.append(item("Message", Text(event.message)))
    blocks.extend(_commit_summary(event.commits, event.total_commits_count))
    return Assembly(blocks=tuple(blocks))


def assemble_merge_request(event: MergeRequestEvent, tz: tzinfo | None = None) -> Assembly:
    """Summarise a merge request state change.

    ``tz`` is the zone the update timestamp is displayed in; when omitted the
    timestamp keeps the offset GitLab sent.
    """
    attrs = event.object_attributes
    actor = event.user.name if event.user and event.user.name else ""
    verb, call_to_action = format_merge_state(attrs.state)

    header: list[Text | Link] = [_code(actor), Text(" ")] if actor else []
    header += [
        Text(verb, TextStyle.BOLD),
        Text(" "),
        Link(f"merge request !{attrs.iid} {attrs.title}", attrs.url),
        Text(", "),
        _code(attrs.source_branch),
        Text(" into "),
        _code(attrs.target_branch),
    ]
    if call_to_action:
        header.extend([Text(", "), Text(call_to_action, TextStyle.BOLD)])
    header.append(Text("."))

    blocks = [line(*header), _project_line(event.project), heading("Merge request details:")]
    if attrs.updated_at:
        blocks.append(item("Updated at", Text(format_timestamp(attrs.updated_at, tz))))
    if attrs.description:
        blocks.append(item("Description", Text(attrs.description)))
    if attrs.last_commit is not None:
        blocks.append(item("Last commit", *_commit_spans(attrs.last_commit)))
    return Assembly(blocks=tuple(blocks))


def is_pipeline_in_flight(builds: list[Build]) -> bool:
    """True while any build is still created, pending or running."""
    return any(build.status in IN_FLIGHT_STATUSES for build in builds)


def _build_line(build: Build, web_url: str, pipeline_username: str | None) -> ContentBlock:
    spans: list[Text | Link | Status] = [
        _code(build.stage),
        Text(": "),
        Link(build.name, f"{web_url}/-/jobs/{build.id}"),
        Text(" > "),
        Status(format_status(build.status)),
    ]
    # A build without user data gets no attribution.
    if build.user is not None and build.user.username != pipeline_username:
        who = build.user.name or build.user.username
        if who:
            spans.extend([Text(", triggered by "), _code(who)])
    return quote(*spans)


def assemble_pipeline(event: PipelineEvent) -> Assembly:
    """Summarise a finished pipeline; in-flight pipelines are suppressed."""
    if is_pipeline_in_flight(event.builds):
        return Assembly(suppressed=True)

    attrs = event.object_attributes
    project = event.project
    pipeline_url = f"{project.web_url}/pipelines/{attrs.id}"
    user = event.user

    blocks = [
        line(
            Link(f"pipeline #{attrs.id}", pipeline_url),
            Text(" "),
            Status(format_status(attrs.status)),
            Text(f", on branch {attrs.ref}, triggered by {format_source(attrs.source)}."),
        ),
        _project_line(project),
        heading("Pipeline details:"),
    ]

    if user is not None and user.name:
        blocks.append(item("Operator", Text(user.name)))
    if attrs.duration is not None and attrs.duration > 0:
        blocks.append(item("Duration", Text(format_duration(attrs.duration))))
    if attrs.stages:
        blocks.append(item(f"{len(attrs.stages)} stage(s)", Text(" / ".join(attrs.stages))))

    mr = event.merge_request
    if mr is not None:
        blocks.append(
            item(
                "Merge request",
                Link(mr.title, mr.url),
                Text(", "),
                _code(mr.source_branch),
                Text(" into "),
                _code(mr.target_branch),
            )
        )
    if event.commit is not None:
        blocks.append(item("Last commit", *_commit_spans(event.commit)))
    if event.builds:
        pipeline_username = user.username if user is not None else None
        blocks.append(heading("Jobs:"))
        blocks.extend(
            _build_line(build, project.web_url, pipeline_username) for build in event.builds
        )
    return Assembly(blocks=tuple(blocks))
