"""Tests for building partial-update payloads.

Key behaviors:
- Only fields the caller supplied can appear in the payload
- Unresolvable names and dates are dropped, never fatal
- An empty payload is a valid outcome
"""
import logging

from leiga_mcp.field_catalog import FieldCatalog
from leiga_mcp.mutation import resolve_update
from leiga_mcp.schemas import UpdateIssueArgs


def update(**kwargs):
    return UpdateIssueArgs.model_validate({"issueId": "ABC-1", **kwargs})


class TestTextFields:

    def test_summary_only(self, catalog):
        result = resolve_update(update(summary="New title"), catalog)
        assert result.payload == {"summary": "New title"}
        assert result.unresolved == []

    def test_empty_description_is_still_a_change(self, catalog):
        result = resolve_update(update(description=""), catalog)
        assert result.payload == {"description": ""}

    def test_nothing_requested(self, catalog):
        result = resolve_update(update(), catalog)
        assert result.payload == {}
        assert result.is_empty

    def test_empty_catalog(self):
        result = resolve_update(update(summary="x", statusName="Done"), FieldCatalog([]))
        assert result.payload == {"summary": "x"}


class TestOptionFields:

    def test_all_single_valued_fields(self, catalog):
        args = update(
            statusName="in progress",
            priorityName="HIGH",
            assigneeName="alice chen",
            releaseVersionName="V1.2.0",
        )
        result = resolve_update(args, catalog)
        assert result.payload == {
            "status": 3,
            "priority": 3,
            "assignee": 1001,
            "releaseVersion": "rv-12",
        }

    def test_multi_valued_fields(self, catalog):
        result = resolve_update(update(labels=["frontend", "urgent"], follows=["Bob"]), catalog)
        assert result.payload == {"label": [502, 503], "follows": [1002]}

    def test_unresolved_names_are_dropped(self, catalog):
        result = resolve_update(update(summary="s", statusName="Blocked", labels=["nope"]), catalog)

        assert result.payload == {"summary": "s"}
        assert {u.field_code for u in result.unresolved} == {"status", "label"}

    def test_partially_resolved_labels_apply(self, catalog):
        result = resolve_update(update(labels=["backend", "mobile"]), catalog)

        assert result.payload == {"label": [501]}
        assert result.unresolved[0].missing == ("mobile",)

    def test_empty_label_list_is_not_a_clear(self, catalog):
        result = resolve_update(update(labels=[]), catalog)
        assert "label" not in result.payload
        assert result.unresolved == []

    def test_unresolved_fields_are_logged(self, catalog, caplog):
        with caplog.at_level(logging.WARNING, logger="leiga-mcp.mutation"):
            resolve_update(update(priorityName="Urgent"), catalog)
        assert "Dropping priority" in caplog.text


class TestDateFields:

    def test_dates_normalized(self, catalog):
        result = resolve_update(update(dueDate="2024-01-15", startDate=1700000000000), catalog)
        assert result.payload == {"dueDate": 1705276800000, "startDate": 1700000000000}

    def test_bad_date_dropped(self, catalog):
        result = resolve_update(update(dueDate="not-a-date", summary="s"), catalog)
        assert result.payload == {"summary": "s"}
        assert result.unresolved[0].argument == "due_date"

    def test_non_ascii_digits_dropped(self, catalog):
        """Superscript digits pass str.isdigit() but are not a timestamp."""
        result = resolve_update(update(dueDate="2²", summary="s"), catalog)
        assert result.payload == {"summary": "s"}


class TestOmittedFieldsNeverAppear:

    def test_only_requested_keys(self, catalog):
        result = resolve_update(update(assigneeName="Bob", dueDate="2024-01-15"), catalog)
        assert set(result.payload) == {"assignee", "dueDate"}
