"""Domain public API."""

from workflow_transfer.domain.errors import (
    ConnectivityError,
    FetchError,
    PluginNotFoundError,
    PluginRegistrationError,
    TransferError,
    TransferStateError,
    TransferValidationError,
)
from workflow_transfer.domain.models import (
    ConnectionCheck,
    PluginInfo,
    ProcessedWorkflow,
    ReportFile,
    TransferFilters,
    TransferOptions,
    TransferProgress,
    TransferProgressResponse,
    TransferSummary,
    ValidateOptions,
    ValidationIssue,
    ValidationResult,
    ValidatorResult,
    WorkflowIssues,
    WorkflowRecord,
)
from workflow_transfer.domain.ports import WorkflowApi
from workflow_transfer.domain.transfer_types import (
    IssueSeverity,
    PluginType,
    RecordStatus,
    ReportFormat,
    TransferStatus,
    ValidationPhase,
)

__all__ = [
    "ConnectionCheck",
    "ConnectivityError",
    "FetchError",
    "IssueSeverity",
    "PluginInfo",
    "PluginNotFoundError",
    "PluginRegistrationError",
    "PluginType",
    "ProcessedWorkflow",
    "RecordStatus",
    "ReportFile",
    "ReportFormat",
    "TransferError",
    "TransferFilters",
    "TransferOptions",
    "TransferProgress",
    "TransferProgressResponse",
    "TransferStateError",
    "TransferStatus",
    "TransferSummary",
    "TransferValidationError",
    "ValidateOptions",
    "ValidationIssue",
    "ValidationPhase",
    "ValidationResult",
    "ValidatorResult",
    "WorkflowApi",
    "WorkflowIssues",
    "WorkflowRecord",
]
