"""
Report Models
=============
Request bodies sent to the Bitbucket Code Insights reports API.

ReportPayload      - body of PUT .../reports/{name}
AnnotationPayload  - body of PUT .../annotations/{name}, and one item of the bulk POST

Optional annotation keys (path, line) are left out of the JSON entirely when
they were not supplied; the API must never receive them as null.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

from code_insights.core.constants import ANNOTATION_TYPE, REPORT_TYPE


class ReportResult(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"


class ReportPayload(BaseModel):
    title: str
    details: str
    report_type: str = REPORT_TYPE
    result: ReportResult

    @classmethod
    def for_issue_count(cls, title: str, number_of_issues: int) -> "ReportPayload":
        if number_of_issues > 0:
            return cls(
                title=title,
                details=f"This PR introduces {number_of_issues} new issue(s).",
                result=ReportResult.FAILED,
            )
        return cls(
            title=title,
            details="This PR introduces no new issues.",
            result=ReportResult.PASSED,
        )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class AnnotationPayload(BaseModel):
    annotation_type: str = ANNOTATION_TYPE
    summary: str
    path: Optional[str] = None
    line: Optional[int] = None

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
