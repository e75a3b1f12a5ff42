"""
Bitbucket Error Formatter
=========================
Orchestrates one formatting run:

  1. Print the table output (always, before any network call).
  2. Create one report for the commit.
  3. Attach one annotation per file-specific error, in analyzer order.
  4. Attach one annotation per error without a file.
  5. Return 1 if there were errors, else 0.

Remote failures are not caught here: a TransportError or ParseError aborts
the run, leaving already-created annotations in place.  The exit code only
reflects the analysis result.

With bulk=True annotations go out in chunks through the bulk endpoint.  If
Bitbucket rejects a chunk, the rest of the run falls back to one PUT per
annotation.  Bulk responses are not matched back to their inputs.
"""
import logging
import uuid
from typing import List

from rich.console import Console

from code_insights.core.constants import MAX_ANNOTATIONS_PER_REQUEST
from code_insights.core.exceptions import TransportError
from code_insights.core.output_formatter import TableErrorFormatter
from code_insights.models.analysis_result import AnalysisResult
from code_insights.models.report import AnnotationPayload
from code_insights.services.bitbucket_client import BitbucketApiClient

logger = logging.getLogger(__name__)


def build_report_title(total_errors: int) -> str:
    noun = "issue" if total_errors == 1 else "issues"
    return f"{total_errors} {noun} found"


class BitbucketErrorFormatter:
    """
    Mirrors an AnalysisResult into a Bitbucket Code Insights report.

    Usage:
        formatter = BitbucketErrorFormatter(TableErrorFormatter(), client)
        exit_code = formatter.format_errors(result, Console())
    """

    def __init__(
        self,
        table_error_formatter: TableErrorFormatter,
        api_client: BitbucketApiClient,
        bulk: bool = False,
    ) -> None:
        self.table_error_formatter = table_error_formatter
        self.api_client = api_client
        self.bulk = bulk

    def format_errors(self, analysis_result: AnalysisResult, output: Console) -> int:
        self.table_error_formatter.format_errors(analysis_result, output)

        total = analysis_result.total_errors_count
        report_uuid = self.api_client.create_report(build_report_title(total), total)
        logger.info("Created report %s for %d error(s)", report_uuid, total)

        if self.bulk:
            self._submit_bulk(report_uuid, self._collect_annotations(analysis_result))
        else:
            for error in analysis_result.file_specific_errors:
                self.api_client.add_annotation(report_uuid, error.message, error.file, error.line)

            for message in analysis_result.not_file_specific_errors:
                self.api_client.add_annotation(report_uuid, message, None, None)

        return int(analysis_result.has_errors)

    @staticmethod
    def _collect_annotations(analysis_result: AnalysisResult) -> List[AnnotationPayload]:
        # Paths stay absolute here; the client makes them relative.
        annotations = [
            AnnotationPayload(summary=error.message, path=error.file, line=error.line)
            for error in analysis_result.file_specific_errors
        ]
        annotations.extend(
            AnnotationPayload(summary=message)
            for message in analysis_result.not_file_specific_errors
        )
        return annotations

    def _submit_bulk(self, report_uuid: uuid.UUID, annotations: List[AnnotationPayload]) -> None:
        for start in range(0, len(annotations), MAX_ANNOTATIONS_PER_REQUEST):
            chunk = annotations[start:start + MAX_ANNOTATIONS_PER_REQUEST]
            try:
                self.api_client.add_annotations_bulk(report_uuid, chunk)
            except TransportError as e:
                logger.warning(
                    "Bulk annotation request rejected (%s), falling back to single requests", e
                )
                for annotation in annotations[start:]:
                    self.api_client.add_annotation(
                        report_uuid, annotation.summary, annotation.path, annotation.line
                    )
                return
