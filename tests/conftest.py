"""Shared fixtures for Leiga MCP tests."""
import pytest

from leiga_mcp.config import Settings
from leiga_mcp.field_catalog import FieldCatalog


@pytest.fixture
def settings(tmp_path):
    return Settings(
        client_id="client-123",
        secret="s3cret",
        api_base_url="https://leiga.test/openapi/api",
        web_url="https://leiga.test",
        token_path=tmp_path / "leiga-token.json",
        _env_file=None,
    )


@pytest.fixture
def option_fields():
    """Raw issue options payload as returned by the options endpoint."""
    return [
        {
            "fieldCode": "status",
            "customFieldName": "Status",
            "requiredFlag": True,
            "options": [
                {"name": "Not Started", "value": 2},
                {"name": "In Progress", "value": 3},
                {"name": "Done", "value": 4},
            ],
        },
        {
            "fieldCode": "Priority",
            "customFieldName": "Priority",
            "requiredFlag": False,
            "options": [
                {"name": "Low", "value": 1},
                {"name": "High", "value": 3},
            ],
        },
        {
            "fieldCode": "assignee",
            "customFieldName": "Assignee",
            "options": [
                {"name": "Alice Chen", "value": 1001},
                {"name": "Bob", "value": 1002},
            ],
        },
        {
            "fieldCode": "label",
            "customFieldName": "Labels",
            "options": [
                {"name": "backend", "value": 501},
                {"name": "Frontend", "value": 502},
                {"name": "urgent", "value": 503},
            ],
        },
        {
            "fieldCode": "follows",
            "customFieldName": "Followers",
            "options": [
                {"name": "Alice Chen", "value": 1001},
                {"name": "Bob", "value": 1002},
            ],
        },
        {
            "fieldCode": "releaseVersion",
            "customFieldName": "Release Version",
            "options": [
                {"name": "v1.2.0", "value": "rv-12"},
            ],
        },
    ]


@pytest.fixture
def catalog(option_fields):
    return FieldCatalog.from_api(option_fields)
