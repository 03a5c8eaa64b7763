"""Transfer status, plugin type and issue severity helpers."""

from enum import StrEnum


class TransferStatus(StrEnum):
    """Lifecycle states of a transfer run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RecordStatus(StrEnum):
    """Outcome of one processed workflow."""

    TRANSFERRED = "transferred"
    SKIPPED = "skipped"
    FAILED = "failed"


class PluginType(StrEnum):
    """Capability a plugin provides."""

    DEDUPLICATOR = "deduplicator"
    VALIDATOR = "validator"
    REPORTER = "reporter"


class IssueSeverity(StrEnum):
    """Severity attached to validator findings."""

    ERROR = "error"
    WARNING = "warning"


class ValidationPhase(StrEnum):
    """Phase in which a validator finding was produced."""

    PRE = "pre"
    STANDALONE = "standalone"


class ReportFormat(StrEnum):
    """Report format inferred from the reporter name."""

    MARKDOWN = "markdown"
    JSON = "json"
    CSV = "csv"
    UNKNOWN = "unknown"


def infer_report_format(reporter_name: str) -> ReportFormat:
    """Infer report format from a reporter name substring."""

    normalized = reporter_name.lower()
    for report_format in (ReportFormat.MARKDOWN, ReportFormat.JSON, ReportFormat.CSV):
        if report_format.value in normalized:
            return report_format
    return ReportFormat.UNKNOWN


__all__ = [
    "IssueSeverity",
    "PluginType",
    "RecordStatus",
    "ReportFormat",
    "TransferStatus",
    "ValidationPhase",
    "infer_report_format",
]
