"""CSV transfer report."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from workflow_transfer.domain.models import ProcessedWorkflow, TransferSummary
from workflow_transfer.domain.transfer_types import RecordStatus
from workflow_transfer.plugins.reporters.file_reporter import FileReporterPlugin

CSV_HEADER = ("Name", "Status", "Tags", "Nodes", "Source ID", "Target ID", "Reason")


class CsvReporter(FileReporterPlugin):
    """Spreadsheet-friendly transfer report, one row per workflow."""

    extension = "csv"

    def __init__(self, output_dir: str | Path = "reports") -> None:
        super().__init__(
            "csv-reporter",
            description="Generates a CSV sheet with one row per workflow",
            output_dir=output_dir,
        )

    def render(self, summary: TransferSummary) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for workflow in summary.workflows:
            writer.writerow(
                (
                    workflow.name,
                    _status_label(workflow),
                    ", ".join(workflow.tags),
                    workflow.node_count,
                    workflow.source_id or "",
                    workflow.target_id or "",
                    workflow.reason or workflow.error or "",
                )
            )
        return buffer.getvalue()


def _status_label(workflow: ProcessedWorkflow) -> str:
    if workflow.status == RecordStatus.TRANSFERRED:
        return "Simulated" if workflow.simulated else "Transferred"
    if workflow.status == RecordStatus.SKIPPED:
        return "Skipped"
    return "Failed"


__all__ = ["CSV_HEADER", "CsvReporter"]
