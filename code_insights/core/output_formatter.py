"""
Output Formatter
================
Human-readable console output for one analysis run.

This is the pass-through formatter the Bitbucket formatter delegates to
before talking to the network, so the table is printed even when the
remote calls fail later on.

Layout:
    one table per file     - "Line" column + the file path relative to the clone dir
    one table of errors without a file location
    a summary line         - "[OK] No errors" or "[ERROR] Found N error(s)"
"""
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from code_insights.models.analysis_result import AnalysisResult, FileSpecificError
from code_insights.utils.path_utils import RelativePathHelper


def format_summary(total_errors: int) -> str:
    if total_errors == 0:
        return "[OK] No errors"
    return f"[ERROR] Found {total_errors} error(s)"


class TableErrorFormatter:
    """Renders an AnalysisResult as rich tables."""

    def __init__(self, relative_path_helper: Optional[RelativePathHelper] = None) -> None:
        self.relative_path_helper = relative_path_helper

    def _display_path(self, file: str) -> str:
        if self.relative_path_helper is None:
            return file
        return self.relative_path_helper.get_relative_path(file)

    def format_errors(self, analysis_result: AnalysisResult, output: Console) -> int:
        # Group by file, keeping the analyzer's file order.
        by_file: Dict[str, List[FileSpecificError]] = {}
        for error in analysis_result.file_specific_errors:
            by_file.setdefault(error.file, []).append(error)

        for file, errors in by_file.items():
            table = Table(show_lines=False)
            table.add_column("Line", justify="right")
            table.add_column(Text(self._display_path(file)))
            for error in errors:
                table.add_row("" if error.line is None else str(error.line), Text(error.message))
            output.print(table)

        if analysis_result.not_file_specific_errors:
            table = Table(show_lines=False)
            table.add_column("Error")
            for message in analysis_result.not_file_specific_errors:
                table.add_row(Text(message))
            output.print(table)

        summary = format_summary(analysis_result.total_errors_count)
        style = "bold red" if analysis_result.has_errors else "bold green"
        # markup=False: the summary contains literal square brackets.
        output.print(summary, style=style, markup=False)

        return int(analysis_result.has_errors)
