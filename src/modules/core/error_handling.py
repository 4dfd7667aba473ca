"""Standardized API error bodies.

Every non-2xx response carries::

    {"type": "validation_error" | "client_error" | "server_error",
     "errors": [{"code": "...", "detail": "...", "attr": "field" | null}]}

Domain errors are translated by the views through ``error_response``;
DRF errors and anything unexpected pass through
``standardized_exception_handler``.  Unexpected exceptions are logged with
their traceback and answered with a generic message only.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


def error_response(
    detail: str,
    status_code: int,
    code: str = "error",
    attr: Optional[str] = None,
) -> Response:
    error_type = "server_error" if status_code >= 500 else "client_error"
    return Response(
        {
            "type": error_type,
            "errors": [{"code": code, "detail": detail, "attr": attr}],
        },
        status=status_code,
    )


def validation_error_response(
    errors: Iterable[dict[str, Any]],
    code: str = "invalid",
) -> Response:
    """400 response listing one entry per invalid field."""
    return Response(
        {
            "type": "validation_error",
            "errors": [
                {"code": code, "detail": e["detail"], "attr": e.get("attr")}
                for e in errors
            ],
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def pydantic_errors(exc: PydanticValidationError) -> List[dict[str, Any]]:
    """Flatten a pydantic ``ValidationError`` into ``{"attr", "detail"}`` dicts."""
    flattened = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
        message = err.get("msg", "Invalid value.")
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        flattened.append({"attr": loc or None, "detail": message})
    return flattened


def _flatten_drf_errors(detail: Any, codes: Any, attr: Optional[str] = None) -> List[dict]:
    if isinstance(detail, dict):
        flattened = []
        for key, value in detail.items():
            child_attr = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                child_attr = attr
            flattened.extend(
                _flatten_drf_errors(value, codes.get(key) if isinstance(codes, dict) else codes, child_attr)
            )
        return flattened
    if isinstance(detail, list):
        flattened = []
        for index, value in enumerate(detail):
            code = codes[index] if isinstance(codes, list) and index < len(codes) else codes
            child_attr = attr
            if isinstance(value, (dict, list)):
                child_attr = f"{attr}.{index}" if attr else str(index)
            flattened.extend(_flatten_drf_errors(value, code, child_attr))
        return flattened
    return [{"code": str(codes or "invalid"), "detail": str(detail), "attr": attr}]


def standardized_exception_handler(exc: Exception, context: dict) -> Response:
    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "api.unhandled_error",
            view=view.__class__.__name__ if view else None,
            error_type=exc.__class__.__name__,
        )
        return error_response(
            GENERIC_ERROR_MESSAGE,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="server_error",
        )

    if isinstance(exc, ValidationError):
        response.data = {
            "type": "validation_error",
            "errors": _flatten_drf_errors(exc.detail, exc.get_codes()),
        }
        return response

    # Http404 / PermissionDenied arrive here as Django exceptions; DRF has
    # already rendered them as {"detail": ErrorDetail}.
    data = response.data
    detail = data.get("detail", data) if isinstance(data, dict) else data
    if isinstance(exc, APIException) and not isinstance(exc.detail, (dict, list)):
        code = exc.detail.code
    else:
        code = getattr(detail, "code", None) or "error"
    response.data = {
        "type": "server_error" if response.status_code >= 500 else "client_error",
        "errors": [{"code": str(code), "detail": str(detail), "attr": None}],
    }
    return response
