"""Async client for the Leiga OpenAPI.

Handles the access token exchange (cached through a CredentialStore), the
``{code, msg, data}`` response envelope, and the handful of endpoints the MCP
tools need. There is no retry logic: a failed call surfaces to the caller.
"""
import logging
from typing import Any, Optional

import httpx

from .config import Settings
from .field_catalog import normalize_name
from .token_store import CredentialStore, TokenRecord


logger = logging.getLogger("leiga-mcp.client")

SUCCESS_CODES = {"0", "200"}

# Endpoint paths relative to Settings.api_base_url
AUTH_PATH = "/authorize/access-token"
ISSUE_DETAIL_PATH = "/issue/detail"
ISSUE_SEARCH_PATH = "/issue/search"
ISSUE_CREATE_PATH = "/issue/add"
ISSUE_UPDATE_PATH = "/issue/update"
ISSUE_OPTIONS_PATH = "/issue/options"
PROJECT_LIST_PATH = "/project/list"
COMMENT_LIST_PATH = "/comment/list"
COMMENT_CREATE_PATH = "/comment/add"
PROJECT_MEMBERS_PATH = "/project/member/list"
ORG_MEMBERS_PATH = "/org/member/list"

CURRENT_USER = "currentAuthedUser"


class LeigaAPIError(Exception):
    """Raised when Leiga rejects a request or returns an unusable response."""

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class LeigaClient:
    """Thin wrapper over ``httpx.AsyncClient`` speaking the Leiga OpenAPI."""

    def __init__(
        self,
        settings: Settings,
        token_store: CredentialStore,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.token_store = token_store
        self._http = http or httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "LeigaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ========================================================================
    # Transport
    # ========================================================================

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        """Return ``data`` from a Leiga response envelope."""
        try:
            body = response.json()
        except ValueError:
            raise LeigaAPIError(f"Invalid JSON response from {response.request.url}", status_code=response.status_code)

        if not isinstance(body, dict):
            return body
        code = body.get("code")
        if code is not None and str(code) not in SUCCESS_CODES:
            message = body.get("msg") or body.get("message") or "unknown error"
            raise LeigaAPIError(f"Leiga API error {code}: {message}", code=str(code), status_code=response.status_code)
        return body.get("data")

    async def authenticate(self) -> TokenRecord:
        """Exchange client credentials for a new access token and cache it."""
        if not self.settings.has_credentials():
            raise LeigaAPIError("LEIGA_CLIENT_ID and LEIGA_SECRET are required")

        response = await self._http.post(
            AUTH_PATH,
            json={"clientId": self.settings.client_id, "secret": self.settings.secret},
        )
        response.raise_for_status()
        data = self._unwrap(response) or {}
        if not data.get("accessToken"):
            raise LeigaAPIError("Authentication response did not include an access token")

        record = TokenRecord.issue(data["accessToken"], int(data.get("expireIn") or 0))
        self.token_store.save_record(record)
        logger.info(f"Obtained new access token (expires in {record.expire_in}s)")
        return record

    async def access_token(self) -> str:
        """Cached access token if still valid, otherwise a fresh one."""
        if self.token_store.is_valid():
            record = self.token_store.read_record()
            if record is not None:
                return record.access_token
        return (await self.authenticate()).access_token

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Authenticated request returning the unwrapped ``data`` field."""
        token = await self.access_token()
        response = await self._http.request(
            method, path, params=params, json=json, headers={"accessToken": token}
        )
        if response.status_code == 401:
            self.token_store.delete_record()
            logger.warning(f"Access token rejected for {method} {path}; cleared cached token")
        response.raise_for_status()
        return self._unwrap(response)

    # ========================================================================
    # Issues
    # ========================================================================

    def issue_url(self, issue_id: Any, project_id: Any = None) -> str:
        base = self.settings.web_url.rstrip("/")
        if project_id:
            return f"{base}/project/{project_id}/issue/{issue_id}"
        return f"{base}/issue/{issue_id}"

    async def _issue_detail(self, issue_id_or_number: str) -> dict:
        ref = str(issue_id_or_number).strip()
        params = {"issueId": ref} if ref.isascii() and ref.isdigit() else {"issueNumber": ref}
        data = await self.request("GET", ISSUE_DETAIL_PATH, params=params)
        if not data:
            raise LeigaAPIError(f"Issue {ref} not found")
        return data

    async def get_issue(self, issue_id_or_number: str) -> dict:
        """Issue detail flattened to the fields the tools display."""
        data = await self._issue_detail(issue_id_or_number)
        fields = data.get("data") or {}
        project_id = fields.get("projectId")
        return {
            "id": data.get("id"),
            "issueNumber": fields.get("issueNumber"),
            "summary": fields.get("summary"),
            "description": fields.get("description"),
            "priority": (fields.get("priorityVO") or {}).get("name"),
            "status": (fields.get("statusVO") or {}).get("name"),
            "assignee": (fields.get("assigneeVO") or {}).get("name"),
            "projectId": project_id,
            "url": self.issue_url(data.get("id"), project_id),
        }

    async def resolve_issue_id(self, issue_id_or_number: str) -> int:
        """Numeric issue ID for an ID or an issue number such as ABC-678."""
        ref = str(issue_id_or_number).strip()
        if ref.isascii() and ref.isdigit():
            return int(ref)
        data = await self._issue_detail(ref)
        issue_id = data.get("id")
        if issue_id is None:
            raise LeigaAPIError(f"Issue {ref} not found")
        return int(issue_id)

    async def search_issues(self, filters: dict) -> list[dict]:
        data = await self.request("POST", ISSUE_SEARCH_PATH, json=filters)
        issues = data if isinstance(data, list) else (data or {}).get("list") or []
        for issue in issues:
            if not issue.get("url") and issue.get("id") is not None:
                issue["url"] = self.issue_url(issue["id"], issue.get("projectId"))
        logger.info(f"Search returned {len(issues)} issues")
        return issues

    async def search_my_issues(self, filters: dict) -> list[dict]:
        return await self.search_issues({**filters, "assignee": CURRENT_USER})

    async def create_issue(self, args: dict) -> dict:
        """Create an issue; ``projectName`` is resolved to its project ID first."""
        project_name = args.get("projectName")
        project = await self.find_project(project_name)
        if project is None:
            raise LeigaAPIError(f"Project '{project_name}' not found")

        body = {k: v for k, v in args.items() if k != "projectName"}
        body["projectId"] = project["id"]
        data = await self.request("POST", ISSUE_CREATE_PATH, json=body) or {}
        if data.get("id") is not None and not data.get("url"):
            data["url"] = self.issue_url(data["id"], project["id"])
        return data

    async def get_issue_options(self, issue_id_or_number: str) -> list[dict]:
        """Selectable option fields for one issue, always fetched fresh."""
        issue_id = await self.resolve_issue_id(issue_id_or_number)
        data = await self.request("GET", ISSUE_OPTIONS_PATH, params={"issueId": issue_id})
        return data if isinstance(data, list) else []

    async def update_issue(self, issue_id: int, payload: dict) -> Any:
        """Submit a partial update; only keys present in ``payload`` change."""
        return await self.request("POST", ISSUE_UPDATE_PATH, json={"id": issue_id, "data": payload})

    # ========================================================================
    # Projects, comments, members
    # ========================================================================

    async def list_projects(self) -> list[dict]:
        data = await self.request("GET", PROJECT_LIST_PATH)
        return data if isinstance(data, list) else []

    async def find_project(self, name: Optional[str]) -> Optional[dict]:
        wanted = normalize_name(name)
        if not wanted:
            return None
        for project in await self.list_projects():
            if normalize_name(project.get("pname")) == wanted:
                return project
        return None

    async def list_issue_comments(self, issue_id_or_number: str, page_number: int = 1, page_size: int = 20) -> dict:
        link_id = await self.resolve_issue_id(issue_id_or_number)
        body = {"commentModule": "issue", "linkId": link_id, "pageNumber": page_number, "pageSize": page_size}
        return await self.request("POST", COMMENT_LIST_PATH, json=body) or {}

    async def create_comment(self, issue_id_or_number: str, content: str, comment_id: Optional[int] = None) -> dict:
        link_id = await self.resolve_issue_id(issue_id_or_number)
        body = {
            "commentModule": "issue",
            "linkId": link_id,
            "plainContent": content,
            "content": content,
        }
        if comment_id:
            body["commentId"] = comment_id
        return await self.request("POST", COMMENT_CREATE_PATH, json=body) or {}

    async def list_project_members(self, args: dict) -> dict:
        return await self.request("POST", PROJECT_MEMBERS_PATH, json=args) or {}

    async def list_org_members(self, args: dict) -> dict:
        return await self.request("POST", ORG_MEMBERS_PATH, json=args) or {}
