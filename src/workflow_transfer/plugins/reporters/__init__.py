"""Built-in reporter plugins."""

from workflow_transfer.plugins.reporters.csv_reporter import CSV_HEADER, CsvReporter
from workflow_transfer.plugins.reporters.file_reporter import (
    REPORT_FILE_PREFIX,
    FileReporterPlugin,
)
from workflow_transfer.plugins.reporters.json_reporter import JsonReporter
from workflow_transfer.plugins.reporters.markdown_reporter import MarkdownReporter

__all__ = [
    "CSV_HEADER",
    "CsvReporter",
    "FileReporterPlugin",
    "JsonReporter",
    "MarkdownReporter",
    "REPORT_FILE_PREFIX",
]
