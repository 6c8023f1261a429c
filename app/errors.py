"""Structured error helpers for API responses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.core.pipeline_config import UnknownStageError


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.payload = build_error_payload(code, message, details)


class DuplicateCandidateError(AppError):
    """Another candidate already uses this email or phone number."""

    def __init__(self, field: str, existing_name: str, existing_value: str):
        label = "Email" if field == "email" else "Phone number"
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"DUPLICATE_{field.upper()}",
            f"{label} already exists for candidate: {existing_name} ({existing_value})",
            {"field": field},
        )


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def unknown_stage_handler(_: Request, exc: UnknownStageError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=build_error_payload("UNKNOWN_STAGE", str(exc), {"stage": exc.stage}),
    )

