"""Content classification models — Severity, classification triple, and policy modes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Severity(str, Enum):
    """Sensitive-content severity. EXPLICIT always dominates MILD."""

    MILD = "mild"
    EXPLICIT = "explicit"


class ContentPolicyMode(str, Enum):
    """User-selected content-visibility rule.

    - SAFE: only records that are not flagged.
    - MODERATE: everything except explicit records.
    - UNRESTRICTED: everything.
    - EXPLICIT_ONLY: only flagged records (audit / inspection views).
    """

    SAFE = "safe"
    MODERATE = "moderate"
    UNRESTRICTED = "unrestricted"
    EXPLICIT_ONLY = "explicit-only"


class Classification(BaseModel):
    """Sensitive-content annotation for one record."""

    flagged: bool = Field(default=False, description="Whether any sensitive-content evidence was found")
    severity: Severity | None = Field(default=None, description="Resolved severity (None only when not flagged)")
    matches: list[str] = Field(default_factory=list, description="Matched keywords and upstream terms")

    @model_validator(mode="after")
    def _severity_requires_flag(self) -> Classification:
        if self.flagged and self.severity is None:
            raise ValueError("flagged classifications must carry a severity")
        if not self.flagged and (self.severity is not None or self.matches):
            raise ValueError("unflagged classifications carry no severity or matches")
        return self

    @classmethod
    def clean(cls) -> Classification:
        """The not-flagged classification."""
        return cls(flagged=False, severity=None, matches=[])
