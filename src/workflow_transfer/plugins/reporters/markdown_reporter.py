"""Markdown transfer report."""

from __future__ import annotations

from pathlib import Path

from workflow_transfer.domain.models import TransferSummary
from workflow_transfer.domain.transfer_types import RecordStatus
from workflow_transfer.plugins.reporters.file_reporter import FileReporterPlugin


class MarkdownReporter(FileReporterPlugin):
    """Human-readable transfer report."""

    extension = "md"

    def __init__(self, output_dir: str | Path = "reports") -> None:
        super().__init__(
            "markdown-reporter",
            description="Generates a Markdown transfer report",
            output_dir=output_dir,
        )

    def render(self, summary: TransferSummary) -> str:
        lines: list[str] = [
            "# Workflow Transfer Report",
            "",
            f"- **Started:** {summary.start_time.isoformat()}",
            f"- **Finished:** {summary.end_time.isoformat()}",
            f"- **Source:** {summary.source_url or '-'}",
            f"- **Target:** {summary.target_url or '-'}",
            f"- **Mode:** {'dry run' if summary.dry_run else 'transfer'}",
        ]
        if summary.cancelled:
            lines.append("- **Cancelled:** yes")

        lines += [
            "",
            "## Summary",
            "",
            "| Metric | Value |",
            "|---|---|",
            f"| Total | {summary.total} |",
            f"| Transferred | {summary.transferred} |",
            f"| Skipped | {summary.skipped} |",
            f"| Failed | {summary.failed} |",
            f"| Processed | {summary.processed} |",
            f"| Duration | {summary.duration_ms / 1000:.2f}s |",
            f"| Success rate | {summary.success_rate:.2f}% |",
        ]

        transferred = summary.workflows_with_status(RecordStatus.TRANSFERRED)
        if transferred:
            lines += [
                "",
                "## Transferred",
                "",
                "| Name | Source ID | Target ID | Nodes |",
                "|---|---|---|---|",
            ]
            for workflow in transferred:
                lines.append(
                    f"| {_cell(workflow.name)} | {_cell(workflow.source_id)} "
                    f"| {_cell(workflow.target_id)} | {workflow.node_count} |"
                )

        skipped = summary.workflows_with_status(RecordStatus.SKIPPED)
        if skipped:
            lines += ["", "## Skipped", "", "| Name | Reason |", "|---|---|"]
            for workflow in skipped:
                lines.append(f"| {_cell(workflow.name)} | {_cell(workflow.reason)} |")

        failed = summary.workflows_with_status(RecordStatus.FAILED)
        if failed:
            lines += ["", "## Failed", "", "| Name | Error |", "|---|---|"]
            for workflow in failed:
                error = workflow.error or workflow.reason
                lines.append(f"| {_cell(workflow.name)} | {_cell(error)} |")

        lines += ["", "---", f"_Generated by {self.name} v{self.version}_", ""]
        return "\n".join(lines)


def _cell(value: object) -> str:
    if value is None or value == "":
        return "-"
    return str(value).replace("|", "\\|").replace("\n", " ")


__all__ = ["MarkdownReporter"]
