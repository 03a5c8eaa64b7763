"""Transfer options, progress, summary and validation models."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
)

from workflow_transfer.domain.errors import TransferValidationError
from workflow_transfer.domain.transfer_types import (
    IssueSeverity,
    PluginType,
    RecordStatus,
    ReportFormat,
    TransferStatus,
    ValidationPhase,
)

WorkflowRecord = dict[str, Any]

DEFAULT_DEDUPLICATOR = "standard-deduplicator"
DEFAULT_VALIDATORS = ("integrity-validator",)
DEFAULT_REPORTERS = ("markdown-reporter",)


class TransferModel(BaseModel):
    """Base model for transfer payloads, accepting camelCase or snake_case keys."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class TransferFilters(TransferModel):
    """Selection criteria applied to the SOURCE listing."""

    workflow_ids: tuple[StrictStr, ...] = Field(default=(), alias="workflowIds")
    workflow_names: tuple[StrictStr, ...] = Field(default=(), alias="workflowNames")
    tags: tuple[StrictStr, ...] = ()
    exclude_tags: tuple[StrictStr, ...] = Field(default=(), alias="excludeTags")


class _OptionsModel(TransferModel):
    @classmethod
    def parse(cls, raw: Mapping[str, Any] | BaseModel | None) -> Self:
        """Validate raw options, raising `TransferValidationError` on failure."""

        if isinstance(raw, cls):
            return raw
        if isinstance(raw, BaseModel):
            raw = raw.model_dump(by_alias=True)
        try:
            return cls.model_validate(raw if raw is not None else {})
        except ValidationError as exc:
            issues = _format_validation_issues(exc)
            raise TransferValidationError(
                "Invalid options: " + "; ".join(issues),
                issues=issues,
            ) from exc


class TransferOptions(_OptionsModel):
    """Options for one `transfer()` run."""

    filters: TransferFilters = Field(default_factory=TransferFilters)
    dry_run: StrictBool = Field(default=False, alias="dryRun")
    parallelism: StrictInt = Field(default=3, ge=1, le=10)
    deduplicator: StrictStr = Field(default=DEFAULT_DEDUPLICATOR, min_length=1)
    validators: tuple[StrictStr, ...] = DEFAULT_VALIDATORS
    reporters: tuple[StrictStr, ...] = DEFAULT_REPORTERS
    skip_credentials: StrictBool = Field(default=False, alias="skipCredentials")


class ValidateOptions(_OptionsModel):
    """Options for a standalone `validate()` run."""

    filters: TransferFilters = Field(default_factory=TransferFilters)
    validators: tuple[StrictStr, ...] = DEFAULT_VALIDATORS


def _format_validation_issues(exc: ValidationError) -> list[str]:
    issues: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        issues.append(f"{location}: {message}" if location else message)
    return issues


@dataclass(slots=True, frozen=True)
class ConnectionCheck:
    """Outcome of a connectivity probe."""

    success: bool
    error: str | None = None
    suggestion: str | None = None


@dataclass(slots=True, frozen=True)
class ValidatorResult:
    """Verdict returned by one validator for one workflow."""

    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class TransferProgress:
    """Immutable progress snapshot of a transfer run."""

    total: int = 0
    processed: int = 0
    transferred: int = 0
    skipped: int = 0
    failed: int = 0
    status: TransferStatus = TransferStatus.IDLE

    @property
    def percentage(self) -> int:
        """Return completion as a rounded integer percentage."""

        if self.total <= 0:
            return 0
        return math.floor(self.processed / self.total * 100 + 0.5)


class TransferProgressResponse(TransferModel):
    """Progress payload shown by the transfer control API."""

    total: int = 0
    processed: int = 0
    transferred: int = 0
    skipped: int = 0
    failed: int = 0
    percentage: int = 0
    status: TransferStatus = TransferStatus.IDLE

    @classmethod
    def from_progress(cls, progress: TransferProgress) -> Self:
        return cls(
            total=progress.total,
            processed=progress.processed,
            transferred=progress.transferred,
            skipped=progress.skipped,
            failed=progress.failed,
            percentage=progress.percentage,
            status=progress.status,
        )


class ProcessedWorkflow(TransferModel):
    """Outcome of processing one SOURCE workflow."""

    name: str
    source_id: str | None = Field(default=None, alias="sourceId")
    status: RecordStatus
    target_id: str | None = Field(default=None, alias="targetId")
    reason: str | None = None
    error: str | None = None
    simulated: bool = False
    tags: tuple[str, ...] = ()
    node_count: int = Field(default=0, alias="nodeCount")


class ReportFile(TransferModel):
    """Report produced by one reporter."""

    reporter: str
    path: str
    format: ReportFormat


class TransferSummary(TransferModel):
    """Final, immutable result of a transfer run."""

    total: int = 0
    transferred: int = 0
    skipped: int = 0
    failed: int = 0
    processed: int = 0
    workflows: tuple[ProcessedWorkflow, ...] = ()
    duration_ms: int = Field(default=0, alias="duration")
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    dry_run: bool = Field(default=False, alias="dryRun")
    cancelled: bool = False
    reports: tuple[ReportFile, ...] = ()
    source_url: str | None = Field(default=None, alias="sourceUrl")
    target_url: str | None = Field(default=None, alias="targetUrl")

    @property
    def success_rate(self) -> float:
        """Return transferred/total in percent."""

        if self.total <= 0:
            return 0.0
        return self.transferred / self.total * 100

    def workflows_with_status(self, status: RecordStatus) -> list[ProcessedWorkflow]:
        """Return processed workflows with the given status, in source order."""

        return [workflow for workflow in self.workflows if workflow.status == status]


class ValidationIssue(TransferModel):
    """One finding reported by a validator."""

    validator: str
    severity: IssueSeverity
    message: str
    phase: ValidationPhase = ValidationPhase.STANDALONE


class WorkflowIssues(TransferModel):
    """Findings collected for one workflow during standalone validation."""

    workflow: str
    workflow_id: str | None = Field(default=None, alias="workflowId")
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def warnings_only(self) -> bool:
        """Return whether every finding is a warning."""

        return all(issue.severity == IssueSeverity.WARNING for issue in self.issues)


class ValidationResult(TransferModel):
    """Aggregate result of a standalone validation run."""

    total: int = 0
    valid: int = 0
    invalid: int = 0
    errors: int = 0
    warnings: int = 0
    validators: tuple[str, ...] = ()
    issues: tuple[WorkflowIssues, ...] = ()


class PluginInfo(TransferModel):
    """Public description of a registered plugin."""

    name: str
    version: str
    type: PluginType
    enabled: bool
    description: str = ""


__all__ = [
    "ConnectionCheck",
    "DEFAULT_DEDUPLICATOR",
    "DEFAULT_REPORTERS",
    "DEFAULT_VALIDATORS",
    "PluginInfo",
    "ProcessedWorkflow",
    "ReportFile",
    "TransferFilters",
    "TransferModel",
    "TransferOptions",
    "TransferProgress",
    "TransferProgressResponse",
    "TransferSummary",
    "ValidateOptions",
    "ValidationIssue",
    "ValidationResult",
    "ValidatorResult",
    "WorkflowIssues",
    "WorkflowRecord",
]
