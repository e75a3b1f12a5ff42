"""
PHPStan Loader
==============
Converts the output of `phpstan analyse --error-format=json` into an
AnalysisResult.

Expected shape:
    {
      "totals": {"errors": 1, "file_errors": 2},
      "files": {
        "/abs/path/src/A.php": {
          "errors": 2,
          "messages": [{"message": "...", "line": 10, "ignorable": true}, ...]
        }
      },
      "errors": ["global error without a file", ...]
    }

PHPStan emits "files" as an empty JSON list (not an object) when there are
no file errors; both forms are accepted.  File order and message order are
preserved.
"""
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Union

from pydantic import ValidationError

from code_insights.core.exceptions import ParseError
from code_insights.models.analysis_result import AnalysisResult, FileSpecificError

logger = logging.getLogger(__name__)


def _parse_file_errors(files: Any) -> List[FileSpecificError]:
    if isinstance(files, list) and not files:
        return []
    if not isinstance(files, dict):
        raise ParseError(f"'files' must be an object, got {type(files).__name__}")

    errors: List[FileSpecificError] = []
    for file, entry in files.items():
        messages = entry.get("messages", []) if isinstance(entry, dict) else None
        if not isinstance(messages, list):
            raise ParseError(f"'files.{file}.messages' must be a list")
        for message in messages:
            if not isinstance(message, dict) or "message" not in message:
                raise ParseError(f"Malformed message entry for {file}: {message!r}")
            try:
                errors.append(
                    FileSpecificError(
                        file=file,
                        line=message.get("line"),
                        message=message["message"],
                    )
                )
            except ValidationError as e:
                raise ParseError(f"Invalid message entry for {file}: {message!r}") from e
    return errors


def load_analysis_result(text: str) -> AnalysisResult:
    """Parse PHPStan JSON output. Raises ParseError on malformed input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Analyzer output is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Analyzer output must be a JSON object")

    file_errors = _parse_file_errors(data.get("files", {}))
    global_errors = data.get("errors", [])
    if not isinstance(global_errors, list) or not all(isinstance(e, str) for e in global_errors):
        raise ParseError("'errors' must be a list of strings")

    result = AnalysisResult(
        file_specific_errors=file_errors,
        not_file_specific_errors=global_errors,
    )
    logger.info(
        "Loaded %d file error(s) and %d general error(s)",
        len(result.file_specific_errors), len(result.not_file_specific_errors),
    )
    return result


def read_analysis_result(source: Union[str, Path]) -> AnalysisResult:
    """Read PHPStan JSON from a file path, or from stdin when source is "-"."""
    try:
        if str(source) == "-":
            text = sys.stdin.read()
        else:
            text = Path(source).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Analyzer output in {source} is not valid UTF-8: {e}") from e
    return load_analysis_result(text)
