"""Pydantic schema validator for workflow records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

from workflow_transfer.domain.models import ValidatorResult, WorkflowRecord
from workflow_transfer.plugins.base import ValidatorPlugin


class WorkflowSchema(BaseModel):
    """Minimal shape every transferable workflow must have."""

    model_config = ConfigDict(extra="allow")

    name: StrictStr = Field(min_length=1)
    nodes: list[dict[str, Any]] = Field(min_length=1)
    connections: dict[str, Any]
    tags: list[Any] = Field(default_factory=list)
    active: StrictBool = False
    settings: dict[str, Any] | None = None
    version_id: str | None = Field(default=None, alias="versionId")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class SchemaValidator(ValidatorPlugin):
    """Validate required fields and types of a workflow record."""

    def __init__(self) -> None:
        super().__init__(
            "schema-validator",
            description="Validates workflows against the workflow schema",
        )

    def validate(self, record: WorkflowRecord) -> ValidatorResult:
        if not record:
            return ValidatorResult(valid=False, errors=("Workflow object is required",))
        try:
            workflow = WorkflowSchema.model_validate(record)
        except ValidationError as exc:
            return ValidatorResult(valid=False, errors=tuple(_format_errors(exc)))

        warnings: list[str] = []
        if not workflow.tags:
            warnings.append("Workflow has no tags. Consider adding tags for better organization.")
        if workflow.settings is None:
            warnings.append("Workflow has no settings defined. Default settings will be used.")
        return ValidatorResult(valid=True, warnings=tuple(warnings))


def _format_errors(exc: ValidationError) -> list[str]:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "root"
        error_type = error.get("type", "")
        message = error.get("msg", "invalid value")
        if error_type == "missing":
            messages.append(f"Required field '{location}' is missing")
        elif "too_short" in error_type:
            messages.append(f"Field '{location}' is too small: {message}")
        elif "too_long" in error_type:
            messages.append(f"Field '{location}' is too big: {message}")
        else:
            messages.append(f"{message} at '{location}'")
    return messages


__all__ = ["SchemaValidator", "WorkflowSchema"]
