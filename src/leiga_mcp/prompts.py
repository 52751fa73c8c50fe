"""Server prompt describing how to use the Leiga tools."""
from typing import Optional

from mcp.types import GetPromptResult, Prompt, PromptMessage, TextContent


SERVER_PROMPT_NAME = "leiga-server-prompt"

SERVER_INSTRUCTIONS = """This server provides access to Leiga, a project management tool. Use it to manage issues.

Key capabilities:
- Create issues: Create new issues with titles, descriptions, priorities, and project assignments.
- Search functionality: Find issues across the organization using flexible search queries with user filters.
- Update issues: Change status, priority, assignee, labels, followers, release version and dates by name.
- Comment management: View comments on issues with author information and timestamps.

Tool Usage:
- search_all_issues:
  - combine multiple filters for precise results
  - query searches title
  - returns max 10 results by default

- my_assigned_issues:
  - get authenticated user's issues
  - use this tool when first-person singular pronouns (e.g., me, my, mine, or myself) appear
  - returns max 10 results by default

- get_issue_detail:
  - using issue ID (e.g., 12345) or the issue number (e.g., ABC-678) get issue detail

- get_issue_options / update_issue:
  - get_issue_options lists the option names each field accepts for that issue
  - update_issue only changes the fields you pass; unknown option names are skipped

- create_issue:
  - statusName must match exact Leiga workflow state names (e.g., 'Not Started', 'In Progress', 'Done')

- list_issue_comments / create_comment:
  - address the issue by ID or issue number
  - reply to an existing comment by providing commentId

Best practices:
- When searching, use specific, targeted queries and apply the filters you can infer.
- When creating issues, write clear, actionable summaries and markdown descriptions with
  context and acceptance criteria, and always specify the correct project name.
- Comments are paginated with 20 items per page by default.

The server uses the authenticated user's permissions for all operations."""


def get_prompts() -> list[Prompt]:
    return [
        Prompt(
            name=SERVER_PROMPT_NAME,
            description="Instructions for using the Leiga MCP server effectively",
        )
    ]


def get_prompt(name: str, arguments: Optional[dict] = None) -> GetPromptResult:
    """Render a prompt by name; raises ValueError for unknown prompts."""
    if name != SERVER_PROMPT_NAME:
        raise ValueError(f"Prompt not found: {name}")
    return GetPromptResult(
        description="Instructions for using the Leiga MCP server effectively",
        messages=[
            PromptMessage(role="user", content=TextContent(type="text", text=SERVER_INSTRUCTIONS))
        ],
    )
