"""MCP tool handlers for Leiga.

All handlers follow a consistent pattern:
- Accept: arguments dict and a LeigaClient
- Validate arguments with the pydantic models in schemas (ValidationError
  propagates to the dispatcher, which reports it to the caller)
- Return: list[TextContent] rendered with formatters
"""
import logging
from datetime import date

from mcp.types import TextContent

from . import formatters
from .client import LeigaClient
from .field_catalog import FieldCatalog
from .mutation import resolve_update
from .schemas import (
    CreateCommentArgs,
    CreateIssueArgs,
    IssueRefArgs,
    ListCommentsArgs,
    ListOrgMembersArgs,
    ListProjectMembersArgs,
    SearchIssuesArgs,
    UpdateIssueArgs,
)

logger = logging.getLogger("leiga-mcp.handlers")


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


# ============================================================================
# Issue Handlers
# ============================================================================

async def handle_search_all_issues(arguments: dict, client: LeigaClient) -> list[TextContent]:
    """Search issues across the organization."""
    args = SearchIssuesArgs.model_validate(arguments)
    issues = await client.search_issues(args.to_api())
    return _text(formatters.format_issue_list(issues))


async def handle_my_assigned_issues(arguments: dict, client: LeigaClient) -> list[TextContent]:
    """Search issues assigned to the authenticated user."""
    args = SearchIssuesArgs.model_validate(arguments)
    issues = await client.search_my_issues(args.to_api())
    return _text(formatters.format_issue_list(issues, show_assignee=False))


async def handle_get_issue_detail(arguments: dict, client: LeigaClient) -> list[TextContent]:
    args = IssueRefArgs.model_validate(arguments)
    issue = await client.get_issue(args.issue_id)
    logger.info(f"Retrieved issue {issue.get('issueNumber')}")
    return _text(formatters.format_issue_detail(issue))


async def handle_create_issue(arguments: dict, client: LeigaClient) -> list[TextContent]:
    args = CreateIssueArgs.model_validate(arguments)
    issue = await client.create_issue(args.to_api())
    logger.info(f"Created issue {issue.get('issueNumber')} in project {args.project_name}")
    return _text(f"Create issue success: {issue.get('issueNumber')}: [{issue.get('title') or args.summary}]({issue.get('url')})")


async def handle_get_issue_options(arguments: dict, client: LeigaClient) -> list[TextContent]:
    """List the selectable fields (and their option names) for one issue."""
    args = IssueRefArgs.model_validate(arguments)
    fields = await client.get_issue_options(args.issue_id)
    return _text(formatters.format_option_fields(fields))


async def handle_update_issue(arguments: dict, client: LeigaClient) -> list[TextContent]:
    """Update an issue from human-readable field values.

    Flow:
    1. Resolve the issue reference to its numeric ID
    2. Fetch the issue's option fields (fresh, never cached)
    3. Translate names/dates into a partial payload
    4. Submit the payload, even when it is empty
    """
    args = UpdateIssueArgs.model_validate(arguments)
    issue_id = await client.resolve_issue_id(args.issue_id)
    catalog = FieldCatalog.from_api(await client.get_issue_options(args.issue_id))

    mutation = resolve_update(args, catalog)
    if mutation.is_empty:
        logger.info(f"No resolvable changes for issue {args.issue_id}; submitting empty update")

    result = await client.update_issue(issue_id, mutation.payload)
    logger.info(f"Updated issue {args.issue_id} ({issue_id}) with fields {sorted(mutation.payload)}")
    return _text(f"Update issue success: {result}")


# ============================================================================
# Comment Handlers
# ============================================================================

async def handle_list_issue_comments(arguments: dict, client: LeigaClient) -> list[TextContent]:
    args = ListCommentsArgs.model_validate(arguments)
    data = await client.list_issue_comments(args.issue_id, args.page_number, args.page_size)
    comments = data.get("list") or []
    comments_text = "\n\n".join(formatters.format_comment(c) for c in comments)
    return _text(f"Total Comments: {data.get('total', len(comments))}\n{comments_text}")


async def handle_create_comment(arguments: dict, client: LeigaClient) -> list[TextContent]:
    args = CreateCommentArgs.model_validate(arguments)
    result = await client.create_comment(args.issue_id, args.content, args.comment_id)
    logger.info(f"Created comment {result.get('id')} on issue {args.issue_id}")
    return _text(f"Comment created successfully with ID: {result.get('id')}")


# ============================================================================
# Project and Member Handlers
# ============================================================================

async def handle_list_project(arguments: dict, client: LeigaClient) -> list[TextContent]:
    """List active (non-archived) projects."""
    projects = await client.list_projects()
    active = [p for p in projects if not formatters.is_archived(p)]
    projects_text = "\n".join(formatters.format_project(p) for p in active)
    return _text(f"Found {len(active)} Projects:\n{projects_text}")


async def handle_list_project_members(arguments: dict, client: LeigaClient) -> list[TextContent]:
    args = ListProjectMembersArgs.model_validate(arguments)
    data = await client.list_project_members(args.to_api())
    members = data.get("list") or []
    members_text = "\n\n".join(formatters.format_member(m) for m in members)
    return _text(f"Found {data.get('total', len(members))} project members:\n{members_text}")


async def handle_list_org_members(arguments: dict, client: LeigaClient) -> list[TextContent]:
    args = ListOrgMembersArgs.model_validate(arguments)
    data = await client.list_org_members(args.to_api())
    members = data.get("list") or []
    members_text = "\n\n".join(formatters.format_member(m) for m in members)
    return _text(f"Found {data.get('total', len(members))} organization members:\n{members_text}")


# ============================================================================
# Utility Handlers
# ============================================================================

async def handle_current_date(arguments: dict, client: LeigaClient) -> list[TextContent]:
    return _text(f"Current Date is: {date.today().isoformat()}")


HANDLERS = {
    "search_all_issues": handle_search_all_issues,
    "my_assigned_issues": handle_my_assigned_issues,
    "get_issue_detail": handle_get_issue_detail,
    "create_issue": handle_create_issue,
    "get_issue_options": handle_get_issue_options,
    "update_issue": handle_update_issue,
    "list_issue_comments": handle_list_issue_comments,
    "create_comment": handle_create_comment,
    "list_project": handle_list_project,
    "list_project_members": handle_list_project_members,
    "list_org_members": handle_list_org_members,
    "current_date": handle_current_date,
}
