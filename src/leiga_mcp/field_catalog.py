"""Option field catalog for a single issue.

Leiga exposes, per issue, the selectable fields (status, priority, assignee,
label, follows, releaseVersion, ...) together with the options currently
legal for that issue. Callers speak in option names; the update endpoint
wants option values. This module answers "which value does option X of
field Y have" for one freshly fetched snapshot.

Matching rules:
- Field codes and option names compare after str.lower() on both sides
- The first matching field / option wins
- Options without a name never match
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger("leiga-mcp.field_catalog")


class Resolution(str, enum.Enum):
    """Outcome of translating caller intent into an identifier."""
    NOT_REQUESTED = "not_requested"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Lookup:
    """Three-state lookup result.

    ``missing`` lists requested names that did not match, which for a
    multi-valued lookup can be non-empty even when the lookup resolved.
    """
    state: Resolution
    value: Any = None
    requested: Any = None
    missing: tuple[str, ...] = field(default_factory=tuple)

    @property
    def resolved(self) -> bool:
        return self.state is Resolution.RESOLVED

    @property
    def unresolved(self) -> bool:
        return self.state is Resolution.UNRESOLVED

    def value_or_none(self) -> Any:
        return self.value if self.resolved else None


NOT_REQUESTED = Lookup(Resolution.NOT_REQUESTED)


def normalize_name(name: Optional[str]) -> str:
    """Case-fold a field code or option name for comparison."""
    return (name or "").lower()


class FieldOption(BaseModel):
    """One selectable option: display name and internal value."""

    name: Optional[str] = None
    value: Any = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, v):
        return None if v is None else str(v)


class FieldDefinition(BaseModel):
    """A selectable field and its options, as returned by the issue options endpoint."""

    field_code: str = Field("", alias="fieldCode")
    custom_field_name: Optional[Any] = Field(None, alias="customFieldName")
    required_flag: bool = Field(False, alias="requiredFlag")
    options: list[FieldOption] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("field_code", mode="before")
    @classmethod
    def _code_or_empty(cls, v):
        return str(v) if v else ""

    @field_validator("required_flag", mode="before")
    @classmethod
    def _flag_or_false(cls, v):
        return bool(v)

    @field_validator("options", mode="before")
    @classmethod
    def _options_or_empty(cls, v):
        if not isinstance(v, list):
            return []
        return [o for o in v if isinstance(o, dict)]

    def option_table(self) -> dict[str, Any]:
        """Lowercased option name -> value, first occurrence wins.

        Multi-valued lookups share this table, so duplicates resolve the same
        way as single-valued ones rather than last-wins.
        """
        table: dict[str, Any] = {}
        for option in self.options:
            key = normalize_name(option.name)
            if key and option.value is not None:
                table.setdefault(key, option.value)
        return table


class FieldCatalog:
    """Snapshot of one issue's option fields.

    Never cached: option sets differ per issue and change over time, so a
    catalog is built from a fresh fetch before every mutation.
    """

    def __init__(self, fields: Sequence[FieldDefinition]):
        self.fields = list(fields)

    @classmethod
    def from_api(cls, raw_fields: Optional[Iterable[Any]]) -> "FieldCatalog":
        """Build a catalog from the raw issue options payload, skipping junk entries."""
        fields = [
            FieldDefinition.model_validate(raw)
            for raw in (raw_fields or [])
            if isinstance(raw, dict)
        ]
        return cls(fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)

    def field_by_code(self, code: str) -> Optional[FieldDefinition]:
        wanted = normalize_name(code)
        for definition in self.fields:
            if normalize_name(definition.field_code) == wanted:
                return definition
        return None

    # ------------------------------------------------------------------
    # Three-state lookups
    # ------------------------------------------------------------------

    def lookup_option(self, code: str, name: Optional[str]) -> Lookup:
        """Resolve a single option name under ``code``."""
        if not name:
            return NOT_REQUESTED

        definition = self.field_by_code(code)
        table = definition.option_table() if definition else {}
        key = normalize_name(name)
        if key in table:
            return Lookup(Resolution.RESOLVED, value=table[key], requested=name)
        return Lookup(Resolution.UNRESOLVED, requested=name, missing=(name,))

    def lookup_options(self, code: str, names: Optional[Sequence[str]]) -> Lookup:
        """Resolve several option names under ``code``.

        Unmatched names are dropped. When nothing matches the lookup is
        UNRESOLVED rather than an empty list, so "no valid values" can never
        turn into "clear this field".
        """
        if not names:
            return NOT_REQUESTED

        definition = self.field_by_code(code)
        table = definition.option_table() if definition else {}
        values = []
        missing = []
        for name in names:
            key = normalize_name(name)
            if key in table:
                values.append(table[key])
            else:
                missing.append(name)

        if not values:
            return Lookup(Resolution.UNRESOLVED, requested=list(names), missing=tuple(missing))
        return Lookup(Resolution.RESOLVED, value=values, requested=list(names), missing=tuple(missing))

    # ------------------------------------------------------------------
    # Absent-or-value projections
    # ------------------------------------------------------------------

    def option_value_by_name(self, code: str, name: Optional[str]) -> Any:
        """Value of option ``name`` under ``code``, or None."""
        return self.lookup_option(code, name).value_or_none()

    def option_values_by_names(self, code: str, names: Optional[Sequence[str]]) -> Optional[list]:
        """Values of the resolvable subset of ``names``, or None if none resolve."""
        return self.lookup_options(code, names).value_or_none()
