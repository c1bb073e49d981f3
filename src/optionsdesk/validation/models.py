"""Pydantic models for strategy consistency reports."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from optionsdesk.core.enums import Severity


class ValidationIssue(BaseModel):
    kind: str
    message: str
    severity: Severity
    expected: str | None = None
    actual: str | None = None


class ValidationReport(BaseModel):
    strategy: str
    errors: list[ValidationIssue] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.errors

    @computed_field
    @property
    def critical_count(self) -> int:
        return sum(1 for e in self.errors if e.severity == Severity.CRITICAL)

    @computed_field
    @property
    def high_count(self) -> int:
        return sum(1 for e in self.errors if e.severity == Severity.HIGH)

    @computed_field
    @property
    def summary(self) -> str:
        if not self.errors:
            return "All validations passed"
        return f"{len(self.errors)} validation errors found"

    @property
    def critical_errors(self) -> list[ValidationIssue]:
        return [e for e in self.errors if e.severity == Severity.CRITICAL]
