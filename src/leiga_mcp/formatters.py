"""Shared formatting functions for MCP responses."""
from datetime import datetime, timezone
from typing import Optional


def format_timestamp(ts: Optional[int]) -> str:
    """Epoch millis as an ISO-8601 UTC string (empty when missing)."""
    if not ts:
        return ""
    return datetime.fromtimestamp(ts / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def format_issue_summary(issue: dict, show_assignee: bool = True) -> str:
    """Format an issue search hit for list views."""
    assignee_info = f"\n  Assignee: {issue.get('assignee') or 'None'}" if show_assignee else ""
    return f"""- {issue.get('issueNumber')}: [{issue.get('title')}]({issue.get('url')})
  Project: {issue.get('projectName')}
  Priority: {issue.get('priority') or 'None'}
  Status: {issue.get('status') or 'None'}{assignee_info}
  Sprint: {issue.get('sprintName') or 'None'}"""


def format_issue_list(issues: list[dict], show_assignee: bool = True) -> str:
    items_text = "\n".join(format_issue_summary(issue, show_assignee) for issue in issues)
    return f"Found {len(issues)} issues:\n{items_text}"


def format_issue_detail(issue: dict) -> str:
    """Format an issue for display with full details."""
    return f"""{issue.get('issueNumber')}: [{issue.get('summary')}]({issue.get('url')})
Priority: {issue.get('priority') or 'None'}
Status: {issue.get('status')}
Assignee: {issue.get('assignee') or 'None'}
Project ID: {issue.get('projectId') or 'None'}
Description: {issue.get('description')}"""


def format_option_field(field: dict) -> str:
    """Format one selectable field and its options."""
    required = " (required)" if field.get("requiredFlag") else ""
    header = f"- {field.get('customFieldName') or 'Unnamed'} ({field.get('fieldCode') or 'unknown_code'}){required}"

    options = field.get("options")
    if not isinstance(options, list) or not options:
        return f"{header}\n  - options: None"

    options_text = "\n".join(_format_option(o if isinstance(o, dict) else {}) for o in options)
    return f"{header}\n{options_text}"


def _format_option(option: dict) -> str:
    name = option.get("name")
    value = option.get("value")
    return f"  - name: {'None' if name is None else name}, value: {'' if value is None else value}"


def format_option_fields(fields: list[dict]) -> str:
    fields_text = "\n\n".join(format_option_field(f) for f in fields)
    return f"Found {len(fields)} option fields:\n{fields_text}"


def _comment_author(entry: dict) -> str:
    return (entry.get("commentUser") or {}).get("userName") or "Unknown"


def format_comment(comment: dict, indent: str = "") -> str:
    """Format a comment followed by its replies."""
    text = (f"{indent}- [ID:{comment.get('commentId')}] {_comment_author(comment)} @ "
            f"{format_timestamp(comment.get('createTime'))}\n"
            f"{indent}  {comment.get('content') or ''}")

    replies = comment.get("subReplies") or []
    if not replies:
        return text

    replies_text = "\n".join(
        f"{indent}  └─ [ID:{reply.get('replyId')}] {_comment_author(reply)} @ "
        f"{format_timestamp(reply.get('createTime'))}\n"
        f"{indent}     {reply.get('content') or ''}"
        for reply in replies
    )
    return f"{text}\n{replies_text}"


def format_member(member: dict) -> str:
    """Format a project or organization member."""
    return (f"- User ID: {member.get('userId') or 'N/A'}\n"
            f"  User Name: {member.get('userName') or 'N/A'}\n"
            f"  Email: {member.get('orgEmail') or 'N/A'}")


def format_project(project: dict) -> str:
    return f"""ID: {project.get('id')}
  Name: {project.get('pname')}
  PKey: {project.get('pkey')}"""


def is_archived(project: dict) -> bool:
    return str(project.get("archived")) == "1"
