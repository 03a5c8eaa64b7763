"""JSON transfer report."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from workflow_transfer.domain.models import TransferSummary
from workflow_transfer.plugins.reporters.file_reporter import FileReporterPlugin


class JsonReporter(FileReporterPlugin):
    """Machine-readable transfer report."""

    extension = "json"

    def __init__(self, output_dir: str | Path = "reports") -> None:
        super().__init__(
            "json-reporter",
            description="Generates a JSON transfer report",
            output_dir=output_dir,
        )

    def render(self, summary: TransferSummary) -> str:
        document = {
            "metadata": {
                "startTime": summary.start_time.isoformat(),
                "endTime": summary.end_time.isoformat(),
                "duration": summary.duration_ms,
                "sourceUrl": summary.source_url,
                "targetUrl": summary.target_url,
                "dryRun": summary.dry_run,
                "cancelled": summary.cancelled,
            },
            "statistics": {
                "total": summary.total,
                "transferred": summary.transferred,
                "skipped": summary.skipped,
                "failed": summary.failed,
                "processed": summary.processed,
                "successRate": f"{summary.success_rate:.2f}%",
            },
            "workflows": [
                workflow.model_dump(mode="json", by_alias=True) for workflow in summary.workflows
            ],
            "reportGeneration": {
                "reporter": self.name,
                "version": self.version,
                "generatedAt": datetime.now(UTC).isoformat(),
            },
        }
        return json.dumps(document, indent=2)


__all__ = ["JsonReporter"]
