"""
Notes Gateway — Pydantic Operation & Response Schemas
======================================================

What:  Pydantic models defining the external contract of the gateway.
How:   The operation endpoint validates the request envelope with
       OperationRequest; the dispatcher validates `arguments` with the
       per-operation argument model below.
Who:   Used by the dispatcher, the gateways, and the route handlers.

Argument conventions:
    - Every argument is optional; absence is normalized later, not here.
    - Names match the external schema (camelCase: dateCreated, dateModified).
    - List arguments may contain nulls; they are skipped during normalization.
    - Timestamps are numeric seconds since epoch. Numeric strings are
      accepted too, since older clients send mutation dates as strings.
    - Unknown argument names are rejected.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Whole-second range a UTC datetime can hold (0001-01-01 .. 9999-12-31T23:59:59).
MIN_SECONDS = -62_135_596_800
MAX_SECONDS = 253_402_300_799

# Bounds apply before truncation: anything that truncates into range is accepted.
Seconds = Annotated[
    float, Field(gt=MIN_SECONDS - 1, lt=MAX_SECONDS + 1, allow_inf_nan=False)
]


# ══════════════════════════════════════════════════════════════════════════
# Operation Arguments — one model per entry point
# ══════════════════════════════════════════════════════════════════════════


class OperationArguments(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        coerce_numbers_to_str=True,  # IDs may arrive as numbers
        frozen=True,
    )


class NotesArgs(OperationArguments):
    """
    Arguments of the `notes` query.

    `dateCreated` is accepted for schema compatibility but does not filter.
    """

    ids: Optional[List[Optional[str]]] = None
    title: Optional[str] = None
    authors: Optional[List[Optional[str]]] = None
    date_created: Optional[Seconds] = Field(default=None, alias="dateCreated")
    team: Optional[str] = None
    todate: Optional[Seconds] = None
    fromdate: Optional[Seconds] = None


class SearchArgs(OperationArguments):
    """
    Arguments of the `search` query.

    Only `query` reaches the search service; the filters are accepted and
    not yet forwarded.
    """

    query: Optional[str] = None
    authors: Optional[List[Optional[str]]] = None
    date_created: Optional[Seconds] = Field(default=None, alias="dateCreated")
    team: Optional[str] = None
    todate: Optional[Seconds] = None
    fromdate: Optional[Seconds] = None


class NoteInputArgs(OperationArguments):
    """Arguments of `createNote` and `updateNote`."""

    id: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    author: Optional[str] = None
    team: Optional[str] = None
    date_created: Optional[Seconds] = Field(default=None, alias="dateCreated")
    date_modified: Optional[Seconds] = Field(default=None, alias="dateModified")
    type: Optional[str] = None
    link: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[List[Optional[str]]] = None


class DeleteNoteArgs(OperationArguments):
    """
    Arguments of `deleteNote`.

    `team` and `link` are accepted but not sent to the record service; the
    delete payload carries only what identifies the note.
    """

    id: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    author: Optional[str] = None
    team: Optional[str] = None
    date_created: Optional[Seconds] = Field(default=None, alias="dateCreated")
    date_modified: Optional[Seconds] = Field(default=None, alias="dateModified")
    type: Optional[str] = None
    link: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Operation Envelope — what POST /api/operations accepts and returns
# ══════════════════════════════════════════════════════════════════════════


class OperationRequest(BaseModel):
    """
    What:  One operation invocation.

    Example:
        {
            "operation": "createNote",
            "arguments": {"title": "Groceries", "body": "milk"},
            "fields": ["id", "title", "dateCreated"]
        }
    """

    operation: str = Field(description="Entry point name, e.g. 'notes' or 'createNote'")
    arguments: Dict[str, Any] = Field(
        default_factory=dict,
        description="Operation arguments, named as in the external schema",
    )
    fields: Optional[List[str]] = Field(
        default=None,
        description="Note fields to return. Omit for every field.",
    )


class OperationError(BaseModel):
    """
    What:  One failure inside an operation result.

    Example:
        {
            "error": "publish_error",
            "message": "The change was saved but its notification could not be published",
            "details": {"channel": "notes.update"}
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")


class OperationResponse(BaseModel):
    """
    What:  Result of one operation.

    `data` is a list of notes for queries and a single note (or null) for
    mutations. A failed operation has `data: null` and one entry in `errors`.
    """

    data: Any = Field(default=None, description="Projected note(s)")
    errors: List[OperationError] = Field(default_factory=list)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class OperationInfo(BaseModel):
    """Describes one entry point for GET /api/operations."""

    name: str
    kind: str = Field(description="query or mutation")
    arguments: List[str] = Field(description="Accepted argument names")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error format for failures outside an operation (bad envelope,
           rate limit, unexpected server errors).
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    record_service: str = Field(description="reachable or unreachable")
    search_service: str = Field(description="reachable, unreachable or not_configured")
    notifications: str = Field(description="Redis status: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
