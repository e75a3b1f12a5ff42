"""
Exceptions
==========
Errors raised while mirroring analysis results to the reports API.

    InsightsError   - base class for everything raised by this package
    TransportError  - HTTP call failed or returned a non-success status
    ParseError      - a body (API response or analyzer output) could not be decoded
"""
from typing import Optional


class InsightsError(Exception):
    """Base class for code insights errors."""


class TransportError(InsightsError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(InsightsError):
    pass
