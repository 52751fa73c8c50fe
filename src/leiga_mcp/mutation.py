"""Build partial-update payloads from human-readable issue changes.

The update endpoint expects option values (internal identifiers) keyed by
field; callers supply names. Resolution is best effort:

1. summary / description are copied through when supplied
2. single-valued option fields (status, priority, assignee, releaseVersion)
   are included only if the name resolves
3. multi-valued option fields (label, follows) are included only if at least
   one name resolves
4. due / start dates are included only if they normalize to epoch millis

A field the caller did not supply never appears in the payload. A field the
caller supplied but that cannot be resolved is dropped and recorded in
``MutationResult.unresolved``; it never fails the whole update. An empty
payload is a valid result.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

from .dates import resolve_date
from .field_catalog import FieldCatalog, Lookup
from .schemas import UpdateIssueArgs


logger = logging.getLogger("leiga-mcp.mutation")


# (argument attribute, field code in the catalog / payload key)
TEXT_FIELDS = (
    ("summary", "summary"),
    ("description", "description"),
)
SINGLE_OPTION_FIELDS = (
    ("status_name", "status"),
    ("priority_name", "priority"),
    ("assignee_name", "assignee"),
    ("release_version_name", "releaseVersion"),
)
MULTI_OPTION_FIELDS = (
    ("labels", "label"),
    ("follows", "follows"),
)
DATE_FIELDS = (
    ("due_date", "dueDate"),
    ("start_date", "startDate"),
)


@dataclass(frozen=True)
class UnresolvedField:
    """A requested change that could not be translated."""
    argument: str
    field_code: str
    requested: Any
    missing: tuple[str, ...] = ()


@dataclass
class MutationResult:
    payload: dict[str, Any] = field(default_factory=dict)
    unresolved: list[UnresolvedField] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.payload


def _apply(result: MutationResult, argument: str, key: str, lookup: Lookup) -> None:
    if lookup.resolved:
        result.payload[key] = lookup.value
        if lookup.missing:
            result.unresolved.append(UnresolvedField(argument, key, lookup.requested, lookup.missing))
    elif lookup.unresolved:
        result.unresolved.append(UnresolvedField(argument, key, lookup.requested, lookup.missing))


def resolve_update(args: UpdateIssueArgs, catalog: FieldCatalog) -> MutationResult:
    """Translate ``args`` into the minimal update payload for one issue."""
    result = MutationResult()

    for attr, key in TEXT_FIELDS:
        value = getattr(args, attr)
        if value is not None:
            result.payload[key] = value

    for attr, code in SINGLE_OPTION_FIELDS:
        _apply(result, attr, code, catalog.lookup_option(code, getattr(args, attr)))

    for attr, code in MULTI_OPTION_FIELDS:
        _apply(result, attr, code, catalog.lookup_options(code, getattr(args, attr)))

    for attr, key in DATE_FIELDS:
        _apply(result, attr, key, resolve_date(getattr(args, attr)))

    for item in result.unresolved:
        if item.field_code in result.payload:
            logger.warning(f"Ignoring unknown {item.field_code} names for issue {args.issue_id}: {list(item.missing)}")
        else:
            logger.warning(f"Dropping {item.field_code} for issue {args.issue_id}: could not resolve {item.requested!r}")

    logger.info(f"Resolved update for issue {args.issue_id}: fields={sorted(result.payload)}")
    return result
