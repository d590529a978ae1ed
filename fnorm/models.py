from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import BatchError


class OutcomeKind(str, Enum):
    UNCHANGED = "unchanged"
    WOULD_RENAME = "would_rename"
    RENAMED = "renamed"


class RenameOutcome(BaseModel):
    path: str
    old_name: str
    new_name: str
    kind: OutcomeKind
    case_only: bool = False

    @property
    def changed(self) -> bool:
        return self.kind is not OutcomeKind.UNCHANGED


class BatchFailure(BaseModel):
    path: str
    kind: str = Field(examples=["PathNotFoundError"])
    message: str
    cause: Optional[str] = None


class BatchReport(BaseModel):
    outcomes: List[RenameOutcome] = Field(default_factory=list)
    failures: List[BatchFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def renamed(self) -> List[RenameOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.RENAMED]

    @property
    def unchanged(self) -> List[RenameOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.UNCHANGED]

    def raise_for_failures(self) -> None:
        if self.failures:
            raise BatchError(self.failures)


class NormalizeRequest(BaseModel):
    filenames: List[str] = Field(examples=[["My Document.PDF", "tcp/udp guide.md"]])
    rules: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Override document, same shape as the TOML config file",
    )


class NormalizedName(BaseModel):
    original: str
    normalized: str
    changed: bool


class NormalizeSummary(BaseModel):
    total: int = 0
    changed: int = 0
    unchanged: int = 0


class NormalizeResponse(BaseModel):
    results: List[NormalizedName]
    summary: NormalizeSummary


class HealthResponse(BaseModel):
    ok: bool = True
