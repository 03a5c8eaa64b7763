"""Shared file output for reporter plugins."""

from __future__ import annotations

import logging
from abc import abstractmethod
from datetime import UTC, datetime
from pathlib import Path

from workflow_transfer.domain.models import TransferSummary
from workflow_transfer.plugins.base import ReporterPlugin

logger = logging.getLogger(__name__)

REPORT_FILE_PREFIX = "transfer-report"


class FileReporterPlugin(ReporterPlugin):
    """Reporter that renders a summary to text and writes it to `output_dir`."""

    extension: str = "txt"

    def __init__(self, name: str, *, description: str, output_dir: str | Path = "reports") -> None:
        super().__init__(name, description=description, options={"output_dir": str(output_dir)})

    def generate(self, summary: TransferSummary) -> str:
        content = self.render(summary)
        output_dir = Path(self.get_option("output_dir", "reports"))
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now(UTC).strftime("%Y-%m-%d-%H%M%S-%f")
        path = output_dir / f"{REPORT_FILE_PREFIX}-{timestamp}.{self.extension}"
        path.write_text(content, encoding="utf-8")
        logger.info("%s wrote %s", self.name, path)
        return str(path)

    @abstractmethod
    def render(self, summary: TransferSummary) -> str:
        """Render summary content."""


__all__ = ["FileReporterPlugin", "REPORT_FILE_PREFIX"]
