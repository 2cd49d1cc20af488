"""Error types for the surfaces around the rendering core.

The renderer itself is total and never raises for string input. These
errors cover loading project directories and reading input files in the CLI.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for --json-errors output."""

    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_UNREADABLE = "FILE_UNREADABLE"
    OUTPUT_UNWRITABLE = "OUTPUT_UNWRITABLE"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ScriboError(Exception):
    """Base error carrying a code and optional structured details."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class ProjectLoadError(ScriboError):
    """Raised when a project directory cannot be loaded."""

    code = ErrorCode.PROJECT_NOT_FOUND


class InputError(ScriboError):
    """Raised when a markdown input file cannot be read."""

    code = ErrorCode.FILE_UNREADABLE


def format_error_json(code: ErrorCode, message: str, details: dict | None = None) -> str:
    """Format an error that is not a ScriboError the same way ScriboError.to_json() does."""
    return ScriboError(message, details, code=code).to_json()
