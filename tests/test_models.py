"""
Unit Tests - Models
===================
Report / annotation request bodies and the AnalysisResult contract.
"""
import pytest
from pydantic import ValidationError

from code_insights.models.analysis_result import AnalysisResult, FileSpecificError
from code_insights.models.report import AnnotationPayload, ReportPayload, ReportResult


class TestReportPayload:

    def test_zero_issues_passes(self):
        payload = ReportPayload.for_issue_count("0 issues found", 0).to_json()
        assert payload == {
            "title": "0 issues found",
            "details": "This PR introduces no new issues.",
            "report_type": "BUG",
            "result": "PASSED",
        }

    @pytest.mark.parametrize("count", [1, 2, 17, 1000])
    def test_any_issue_fails_and_mentions_count(self, count):
        payload = ReportPayload.for_issue_count("t", count)
        assert payload.result == ReportResult.FAILED
        assert payload.details == f"This PR introduces {count} new issue(s)."
        assert payload.to_json()["result"] == "FAILED"


class TestAnnotationPayload:

    def test_minimal_payload_has_no_optional_keys(self):
        body = AnnotationPayload(summary="global config invalid").to_json()
        assert body == {"annotation_type": "BUG", "summary": "global config invalid"}
        assert "path" not in body
        assert "line" not in body

    def test_path_and_line_are_kept(self):
        body = AnnotationPayload(summary="m", path="src/A.php", line=10).to_json()
        assert body["path"] == "src/A.php"
        assert body["line"] == 10

    def test_summary_is_required(self):
        with pytest.raises(ValidationError):
            AnnotationPayload()


class TestAnalysisResult:

    def test_empty_result(self):
        result = AnalysisResult()
        assert result.total_errors_count == 0
        assert result.has_errors is False

    def test_counts_both_kinds_of_errors(self):
        result = AnalysisResult(
            file_specific_errors=[FileSpecificError(file="/repo/a.php", line=1, message="x")],
            not_file_specific_errors=["y", "z"],
        )
        assert result.total_errors_count == 3
        assert result.has_errors is True

    def test_is_immutable(self):
        error = FileSpecificError(file="/repo/a.php", line=1, message="x")
        with pytest.raises(ValidationError):
            error.line = 2
