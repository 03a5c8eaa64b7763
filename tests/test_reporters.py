from __future__ import annotations

import csv
import json
from datetime import UTC, datetime
from pathlib import Path

from workflow_transfer.domain.models import ProcessedWorkflow, TransferSummary
from workflow_transfer.domain.transfer_types import RecordStatus
from workflow_transfer.plugins import CsvReporter, JsonReporter, MarkdownReporter
from workflow_transfer.plugins.reporters import CSV_HEADER


def _summary(*, dry_run: bool = False) -> TransferSummary:
    workflows = (
        ProcessedWorkflow(
            name="Customer Sync",
            source_id="1",
            status=RecordStatus.TRANSFERRED,
            target_id="simulated" if dry_run else "t-1",
            simulated=dry_run,
            tags=("crm", "prod"),
            node_count=2,
        ),
        ProcessedWorkflow(
            name="Invoice | Export",
            source_id="2",
            status=RecordStatus.SKIPPED,
            reason="Duplicate detected",
            node_count=3,
        ),
        ProcessedWorkflow(
            name="Broken",
            source_id="3",
            status=RecordStatus.FAILED,
            error="HTTP 500: boom",
            node_count=1,
        ),
    )
    return TransferSummary(
        total=4,
        transferred=1,
        skipped=1,
        failed=1,
        processed=3,
        workflows=workflows,
        duration_ms=1500,
        start_time=datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC),
        end_time=datetime(2026, 1, 2, 3, 4, 6, 500000, tzinfo=UTC),
        dry_run=dry_run,
        cancelled=True,
        source_url="https://source.example.com",
        target_url="https://target.example.com",
    )


def test_markdown_reporter_writes_sections(tmp_path: Path) -> None:
    path = Path(MarkdownReporter(output_dir=tmp_path).generate(_summary()))

    assert path.parent == tmp_path
    assert path.name.startswith("transfer-report-")
    assert path.suffix == ".md"
    content = path.read_text(encoding="utf-8")
    assert content.startswith("# Workflow Transfer Report")
    assert "- **Cancelled:** yes" in content
    assert "| Total | 4 |" in content
    assert "| Duration | 1.50s |" in content
    assert "| Success rate | 25.00% |" in content
    assert "| Customer Sync | 1 | t-1 | 2 |" in content
    assert "| Invoice \\| Export | Duplicate detected |" in content
    assert "## Failed" in content
    assert "| Broken | HTTP 500: boom |" in content


def test_markdown_reporter_omits_empty_sections(tmp_path: Path) -> None:
    summary = _summary().model_copy(update={"workflows": (), "cancelled": False})

    content = Path(MarkdownReporter(output_dir=tmp_path).generate(summary)).read_text(
        encoding="utf-8"
    )

    assert "## Summary" in content
    assert "## Transferred" not in content
    assert "## Skipped" not in content
    assert "Cancelled" not in content


def test_json_reporter_writes_document(tmp_path: Path) -> None:
    path = Path(JsonReporter(output_dir=tmp_path / "nested").generate(_summary()))

    assert path.suffix == ".json"
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["metadata"]["duration"] == 1500
    assert document["metadata"]["sourceUrl"] == "https://source.example.com"
    assert document["metadata"]["cancelled"] is True
    assert document["statistics"] == {
        "total": 4,
        "transferred": 1,
        "skipped": 1,
        "failed": 1,
        "processed": 3,
        "successRate": "25.00%",
    }
    assert document["workflows"][0]["sourceId"] == "1"
    assert document["workflows"][0]["targetId"] == "t-1"
    assert document["workflows"][0]["nodeCount"] == 2
    assert document["reportGeneration"]["reporter"] == "json-reporter"


def test_csv_reporter_writes_one_row_per_workflow(tmp_path: Path) -> None:
    path = Path(CsvReporter(output_dir=tmp_path).generate(_summary(dry_run=True)))

    assert path.suffix == ".csv"
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))

    assert tuple(rows[0]) == CSV_HEADER
    assert rows[1] == ["Customer Sync", "Simulated", "crm, prod", "2", "1", "simulated", ""]
    assert rows[2] == ["Invoice | Export", "Skipped", "", "3", "2", "", "Duplicate detected"]
    assert rows[3] == ["Broken", "Failed", "", "1", "3", "", "HTTP 500: boom"]


def test_reports_written_back_to_back_get_distinct_files(tmp_path: Path) -> None:
    reporter = JsonReporter(output_dir=tmp_path)

    first = reporter.generate(_summary())
    second = reporter.generate(_summary())

    assert first != second
    assert len(list(tmp_path.glob("transfer-report-*.json"))) == 2
