"""Pydantic schemas for tool argument validation.

Tool arguments arrive in camelCase (the names advertised in the tool input
schemas); fields are snake_case with camelCase aliases.
"""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ToolArgs(BaseModel):
    """Base for tool argument models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_api(self) -> dict:
        """Serialize the supplied (non-null) arguments with their wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


# Issue Schemas

class SearchIssuesArgs(ToolArgs):
    """Filters for search_all_issues and my_assigned_issues."""

    query: Optional[str] = Field(None, description="Text to search in title")
    project_name: Optional[str] = Field(None, alias="projectName")
    status: Optional[str] = Field(None, description="2=ToDo, 3=In Progress, 4=Done")
    assignee: Optional[str] = None
    label: Optional[str] = None
    priority: Optional[str] = None
    sprint: Optional[str] = None
    work_type: Optional[str] = Field(None, alias="workType")
    start_after_date: Optional[str] = Field(None, alias="startAfterDate")
    start_before_date: Optional[str] = Field(None, alias="startBeforeDate")
    due_after_date: Optional[str] = Field(None, alias="dueAfterDate")
    due_before_date: Optional[str] = Field(None, alias="dueBeforeDate")
    created_after_date: Optional[str] = Field(None, alias="createdAfterDate")
    created_before_date: Optional[str] = Field(None, alias="createdBeforeDate")
    page_size: int = Field(10, alias="pageSize", ge=1)


class IssueRefArgs(ToolArgs):
    """An issue addressed by numeric ID or issue number (e.g. 12345 or ABC-678)."""

    issue_id: str = Field(..., alias="issueId", min_length=1)


class UpdateIssueArgs(IssueRefArgs):
    """Desired state for update_issue, expressed with human-readable names.

    Every field except issue_id is optional; only supplied fields are changed.
    """

    summary: Optional[str] = None
    description: Optional[str] = None
    status_name: Optional[str] = Field(None, alias="statusName")
    priority_name: Optional[str] = Field(None, alias="priorityName")
    assignee_name: Optional[str] = Field(None, alias="assigneeName")
    labels: Optional[list[str]] = None
    follows: Optional[list[str]] = None
    release_version_name: Optional[str] = Field(None, alias="releaseVersionName")
    due_date: Optional[Union[int, float, str]] = Field(None, alias="dueDate")
    start_date: Optional[Union[int, float, str]] = Field(None, alias="startDate")


class CreateIssueArgs(ToolArgs):
    """Arguments for create_issue."""

    summary: str = Field(..., min_length=1)
    project_name: str = Field(..., alias="projectName", min_length=1)
    description: Optional[str] = None
    priority: Optional[str] = Field(None, description="Priority name, e.g. 'High'")
    status_name: Optional[str] = Field(None, alias="statusName")
    sprint: Optional[str] = None
    work_type: Optional[str] = Field(None, alias="workType")


# Comment Schemas

class ListCommentsArgs(IssueRefArgs):
    """Arguments for list_issue_comments."""

    page_number: int = Field(1, alias="pageNumber", ge=1)
    page_size: int = Field(20, alias="pageSize", ge=1)


class CreateCommentArgs(IssueRefArgs):
    """Arguments for create_comment; comment_id makes it a reply."""

    content: str = Field(..., min_length=1)
    comment_id: Optional[int] = Field(None, alias="commentId")


# Member Schemas

class ListProjectMembersArgs(ToolArgs):
    """Arguments for list_project_members."""

    project_id: int = Field(..., alias="projectId")
    keyword: Optional[str] = None
    page_number: int = Field(1, alias="pageNumber", ge=1)
    page_size: int = Field(20, alias="pageSize", ge=1)


class ListOrgMembersArgs(ToolArgs):
    """Arguments for list_org_members."""

    key: Optional[str] = Field(None, description="Keyword to search for members")
    page_number: int = Field(1, alias="pageNumber", ge=1)
    page_size: int = Field(20, alias="pageSize", ge=1)
