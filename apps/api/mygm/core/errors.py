"""
Error taxonomy for the simulation core.

Every business-rule failure is raised before the first mutating statement of
its transaction; main.py renders it as the error envelope
{error, message, request_id, details}.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException


class DomainError(HTTPException):
    http_status = 400
    default_code = "bad_request"

    def __init__(self, message: str, *, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=self.http_status,
            detail={"error": self.code, "message": message, "details": self.details},
        )


class NotFound(DomainError):
    http_status = 404
    default_code = "not_found"


class InvalidState(DomainError):
    # already_resolved | not_editable | show_incomplete | invalid_contract | ...
    http_status = 409
    default_code = "invalid_state"


class ValidationError(DomainError):
    http_status = 422
    default_code = "validation_error"
