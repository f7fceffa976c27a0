"""
Notes Gateway — Operation Route Handlers
=========================================

What:  POST /api/operations runs one entry point; GET /api/operations lists them.
How:   Validates the envelope, builds the caller identity from the identity
       header, delegates to the Dispatcher, returns `data` and `errors`.
Who:   Called by the notes frontend and by other services.

Request Flow:
    1. Client POSTs {"operation", "arguments", "fields"}
    2. Caller identity is read from the identity header (X-User-Email)
    3. Dispatcher runs the operation and captures any operation error
    4. Response is HTTP 200 with {"data", "errors", "request_id"}

    Operation errors are part of a successful HTTP exchange, the way a
    field-resolution engine reports them. Only a malformed envelope (422)
    or an unexpected server failure (500) changes the HTTP status.
"""

import json
import logging
from typing import Any, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from gateway.connections import get_caller_identity, get_dispatcher
from gateway.exceptions import GatewayError
from gateway.middleware.request_id import request_id_var
from gateway.schemas.note import (
    ErrorResponse,
    OperationError,
    OperationInfo,
    OperationRequest,
    OperationResponse,
)
from gateway.services.dispatch import Dispatcher
from gateway.services.identity import CallerIdentity

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Operations"])


class GatewayJSONResponse(JSONResponse):
    """
    JSON response that escapes non-ASCII text.

    Note images are byte-for-byte string views and may hold lone surrogates,
    which cannot be encoded as UTF-8 but survive as \\u escapes.
    """

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=True,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


def to_operation_error(error: GatewayError) -> OperationError:
    return OperationError(
        error=error.code,
        message=error.message,
        details=error.public_details(),
    )


@router.post(
    "/operations",
    response_model=OperationResponse,
    response_class=GatewayJSONResponse,
    responses={
        200: {"description": "Operation result (data and/or errors)", "model": OperationResponse},
        422: {"description": "Malformed request envelope"},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Run a notes query or mutation",
    description=(
        "Runs one of the entry points notes, search, createNote, updateNote or "
        "deleteNote with the given arguments and returns the selected note fields. "
        "Failures of the operation itself are reported in `errors`."
    ),
)
async def run_operation(
    body: OperationRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> OperationResponse:
    """
    Run a single operation.

    Example:
        POST /api/operations
        X-User-Email: ada@example.com
        {"operation": "notes", "arguments": {"title": "todo"}, "fields": ["id", "title"]}

        → {"data": [{"id": "42", "title": "todo"}], "errors": [], "request_id": "a1b2c3d4"}
    """
    result = await dispatcher.execute(
        body.operation,
        body.arguments,
        caller,
        fields=body.fields,
    )

    return OperationResponse(
        data=result.data,
        errors=[to_operation_error(e) for e in result.errors],
        request_id=request_id_var.get("") or None,
    )


@router.get(
    "/operations",
    response_model=List[OperationInfo],
    summary="List available operations",
    description="Returns every entry point with its kind and accepted argument names.",
)
async def list_operations(
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> List[OperationInfo]:
    return [OperationInfo(**info) for info in dispatcher.describe()]
