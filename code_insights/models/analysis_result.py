"""
Analysis Result Model
=====================
Pydantic models for the output of one static-analysis run.
This is the contract between the analyzer input layer and the formatters.

Fields:
    file_specific_errors      - errors anchored to a file (absolute path, line, message)
    not_file_specific_errors  - free-text errors with no location (config problems etc.)

Both sequences keep the order the analyzer produced them in.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class FileSpecificError(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: Optional[int] = None
    message: str


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_specific_errors: List[FileSpecificError] = []
    not_file_specific_errors: List[str] = []

    @property
    def total_errors_count(self) -> int:
        return len(self.file_specific_errors) + len(self.not_file_specific_errors)

    @property
    def has_errors(self) -> bool:
        return self.total_errors_count > 0
