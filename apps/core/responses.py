"""Helpers for the JSON error envelope shared by every API endpoint."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rest_framework.response import Response  # type: ignore


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_request_id(request) -> str:
    request_id = getattr(request, "request_id", None)
    if request_id is None:
        request_id = uuid.uuid4().hex
        request.request_id = request_id
    return request_id


def error_response(
    request,
    error: str,
    code: str,
    status: int,
    details: Optional[Dict[str, Any]] = None,
    **extra: Any,
) -> Response:
    """
    Build `{error, code, details?, ..., timestamp, requestId}` with no-store caching.

    Extra keyword arguments with a None value are left out.
    """
    body: Dict[str, Any] = {"error": error, "code": code}
    if details:
        body["details"] = details
    body.update({key: value for key, value in extra.items() if value is not None})
    body["timestamp"] = utc_timestamp()
    body["requestId"] = get_request_id(request)

    response = Response(body, status=status)
    response["Cache-Control"] = "no-store"
    return response


def failure_response(request, failure) -> Response:
    """Error envelope for a BookingFailure value."""
    data = failure.to_dict()
    return error_response(
        request,
        data.pop("error"),
        data.pop("code"),
        failure.kind.http_status,
        details=data.pop("details", None),
        **data,
    )
