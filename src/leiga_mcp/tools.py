"""MCP tool definitions for Leiga.

This module provides the definitive list of tools exposed by the server.
"""

from mcp.types import Tool


ISSUE_REF_DESCRIPTION = "Issue ID or issue number (e.g., 12345 or ABC-678)"
PRIORITY_DESCRIPTION = "priority name (e.g., 'Lowest', 'Low', 'Medium', 'High', 'Highest')"


def _search_properties(include_assignee: bool) -> dict:
    """Filter properties shared by search_all_issues and my_assigned_issues."""
    properties = {
        "query": {"type": "string", "description": "Optional text to search in title"},
        "projectName": {"type": "string", "description": "Filter by project name"},
        "status": {"type": "string", "description": "Filter by status (2=ToDo, 3=In Progress, 4=Done)"},
        "assignee": {"type": "string", "description": "Filter by assignee's user name"},
        "label": {"type": "string", "description": "Filter by label name"},
        "priority": {"type": "string", "description": f"Filter by {PRIORITY_DESCRIPTION}"},
        "sprint": {"type": "string", "description": "Filter by sprint name"},
        "workType": {"type": "string", "description": "Filter by issue work type name"},
    }
    for prefix, verb in (("start", "start"), ("due", "are due"), ("created", "were created")):
        properties[f"{prefix}AfterDate"] = {
            "type": "string",
            "description": f"Filter issues that {verb} AFTER or ON this date (YYYY-MM-DD format)"
        }
        properties[f"{prefix}BeforeDate"] = {
            "type": "string",
            "description": f"Filter issues that {verb} BEFORE or ON this date (YYYY-MM-DD format)"
        }
    properties["pageSize"] = {"type": "number", "description": "Max results to return (default: 10)"}
    if not include_assignee:
        del properties["assignee"]
    return properties


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Leiga issue management."""
    return [
        # ============================================================================
        # Issue Tools
        # ============================================================================
        Tool(
            name="search_all_issues",
            description="Searches Leiga issues using flexible criteria. Supports filtering by any combination of: "
                       "title text, project name, status (2=ToDo, 3=In Progress, 4=Done), assignee, label, "
                       "priority name, work type, start date range, due date range, and create date range. "
                       "Returns up to 10 issues by default (configurable via pageSize).",
            inputSchema={
                "type": "object",
                "properties": _search_properties(include_assignee=True)
            }
        ),
        Tool(
            name="my_assigned_issues",
            description="Retrieves my issues, specifically those assigned to the authenticated user. "
                       "Use this tool only when first-person singular pronouns (e.g., me, my, mine, or myself) "
                       "are explicitly used in the query.",
            inputSchema={
                "type": "object",
                "properties": _search_properties(include_assignee=False)
            }
        ),
        Tool(
            name="get_issue_detail",
            description="Get issue detail by using issue ID or issue number.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": ISSUE_REF_DESCRIPTION}
                },
                "required": ["issueId"]
            }
        ),
        Tool(
            name="create_issue",
            description="Creates a new Leiga issue. Required fields: summary (issue title) and projectName. "
                       "Optional fields: description, priority, statusName (e.g., 'Not Started', 'In Progress', 'Done'), "
                       "sprint (sprint name), and workType (e.g., 'Story', 'Chore', 'Bug'). "
                       "Returns the created issue's identifier and URL.",
            inputSchema={
                "type": "object",
                "properties": {
                    "summary": {"type": "string", "description": "Issue summary"},
                    "projectName": {"type": "string", "description": "Project name"},
                    "description": {"type": "string", "description": "Issue description"},
                    "priority": {"type": "string", "description": PRIORITY_DESCRIPTION},
                    "statusName": {"type": "string", "description": "Issue status (e.g., 'Not Started', 'In Progress', 'Done')"},
                    "sprint": {"type": "string", "description": "Sprint name"},
                    "workType": {"type": "string", "description": "Work type name (e.g., 'Story', 'Chore', 'Bug')"}
                },
                "required": ["summary", "projectName"]
            }
        ),
        Tool(
            name="get_issue_options",
            description="Get selectable option fields for an issue by ID or issue number. "
                       "Shows the option names accepted by update_issue.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": ISSUE_REF_DESCRIPTION}
                },
                "required": ["issueId"]
            }
        ),
        Tool(
            name="update_issue",
            description="Update an issue by ID or issue number. Names provided for fields (e.g., statusName, "
                       "priorityName, assigneeName, labels) are resolved to IDs via get_issue_options before updating. "
                       "Only the fields you provide are changed; names that do not match an option are skipped.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": ISSUE_REF_DESCRIPTION},
                    "summary": {"type": "string", "description": "New summary (optional)"},
                    "description": {"type": "string", "description": "New description (optional)"},
                    "statusName": {"type": "string", "description": "Workflow status name to set (optional)"},
                    "priorityName": {"type": "string", "description": "Priority name to set (optional)"},
                    "assigneeName": {"type": "string", "description": "Assignee name to set (optional)"},
                    "labels": {"type": "array", "items": {"type": "string"}, "description": "Label names to set (optional)"},
                    "follows": {"type": "array", "items": {"type": "string"}, "description": "Follower names to set (optional)"},
                    "releaseVersionName": {"type": "string", "description": "Release version name to set (optional)"},
                    "dueDate": {"type": ["string", "number"], "description": "Due date (YYYY-MM-DD) or timestamp in ms (optional)"},
                    "startDate": {"type": ["string", "number"], "description": "Start date (YYYY-MM-DD) or timestamp in ms (optional)"}
                },
                "required": ["issueId"]
            }
        ),
        # ============================================================================
        # Comment Tools
        # ============================================================================
        Tool(
            name="list_issue_comments",
            description="List comments of an issue by ID or issue number with pagination.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": ISSUE_REF_DESCRIPTION},
                    "pageNumber": {"type": "number", "description": "Page number (default 1)"},
                    "pageSize": {"type": "number", "description": "Page size (default 20)"}
                },
                "required": ["issueId"]
            }
        ),
        Tool(
            name="create_comment",
            description="Create a comment for an issue. Can be a new comment or a reply to an existing comment.",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueId": {"type": "string", "description": ISSUE_REF_DESCRIPTION},
                    "content": {"type": "string", "description": "Comment content"},
                    "commentId": {"type": "number", "description": "Optional: Comment ID to reply to (for replies)"}
                },
                "required": ["issueId", "content"]
            }
        ),
        # ============================================================================
        # Project and Member Tools
        # ============================================================================
        Tool(
            name="list_project",
            description="Show project list",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="list_project_members",
            description="List members of a specific project with optional search and pagination.",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectId": {"type": "number", "description": "Project ID"},
                    "keyword": {"type": "string", "description": "Optional keyword to search for members"},
                    "pageNumber": {"type": "number", "description": "Page number (default: 1)"},
                    "pageSize": {"type": "number", "description": "Page size (default: 20)"}
                },
                "required": ["projectId"]
            }
        ),
        Tool(
            name="list_org_members",
            description="List all organization members with optional search and pagination.",
            inputSchema={
                "type": "object",
                "properties": {
                    "key": {"type": "string", "description": "Optional keyword to search for members"},
                    "pageNumber": {"type": "number", "description": "Page number (default: 1)"},
                    "pageSize": {"type": "number", "description": "Page size (default: 20)"}
                }
            }
        ),
        # ============================================================================
        # Utility Tools
        # ============================================================================
        Tool(
            name="current_date",
            description="Get current date (local timezone)",
            inputSchema={"type": "object", "properties": {}}
        ),
    ]
