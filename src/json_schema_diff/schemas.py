"""Schemas for diff output records."""

from typing import Any

from pydantic import BaseModel, Field

from json_schema_diff.schema.changes import Change


class ChangeRecord(BaseModel):
    """One line of line-delimited diff output."""

    path: str = Field(..., description="JSON pointer into the schema, empty for the root")
    change: dict[str, dict[str, Any]] = Field(
        ..., description="Change kind tag mapped to its fields"
    )
    is_breaking: bool = Field(..., description="Whether the change breaks existing data")

    @classmethod
    def from_change(cls, change: Change) -> "ChangeRecord":
        return cls(
            path=change.path,
            change=change.change.to_dict(),
            is_breaking=change.is_breaking,
        )

    @property
    def tag(self) -> str:
        return next(iter(self.change))


class DiffSummary(BaseModel):
    """Totals for a diff run."""

    total: int = Field(default=0, description="Number of changes found")
    breaking: int = Field(default=0, description="Number of breaking changes")
    non_breaking: int = Field(default=0, description="Number of non-breaking changes")

    @classmethod
    def from_changes(cls, changes: list[Change]) -> "DiffSummary":
        breaking = sum(1 for change in changes if change.is_breaking)
        return cls(total=len(changes), breaking=breaking, non_breaking=len(changes) - breaking)
