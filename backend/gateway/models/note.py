"""
Notes Gateway — Backend Domain Models
======================================

What:  The records exchanged with the record service and the search service.
How:   Pydantic models serialized to/from JSON on every backend call.
Who:   Built by the record/search gateways; parsed by the httpx clients.
When:  Constructed fresh for each request and discarded when it completes.

Wire Format:
    - Field names follow the backend contract (camelCase for the two dates).
    - Timestamps are RFC 3339 in UTC with whole-second precision.
    - `image` travels base64-encoded, since it is an arbitrary byte payload.

Ownership:
    The record service owns notes. The gateway holds these objects only for
    the duration of one request and never persists them.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# The zero instant: what every absent timestamp argument normalizes to.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Note(BaseModel):
    """
    A note record as the record service stores it.

    Every text field defaults to the empty string and both dates default to
    EPOCH, so a Note built from partial arguments is always complete.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    id: str = ""
    title: str = ""
    body: str = ""
    author: str = ""
    team: str = ""
    type: str = ""
    link: str = ""
    image: bytes = b""
    tags: List[str] = Field(default_factory=list)
    date_created: datetime = Field(default=EPOCH, alias="dateCreated")
    date_modified: datetime = Field(default=EPOCH, alias="dateModified")

    @field_validator("date_created", "date_modified")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Backend dates without an offset are UTC, never host-local time."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_wire(self) -> dict:
        """JSON-ready dict in the backend's field naming."""
        return self.model_dump(mode="json", by_alias=True)


class NoteList(BaseModel):
    """Envelope returned by the list and search endpoints."""

    notes: List[Note] = Field(default_factory=list)


class Query(BaseModel):
    """
    Filter for listing notes at the record service.

    `ids` and `authors` stay None when the caller did not pass them, which the
    record service reads as "no filter". A None date bound is unbounded on
    that side.
    """

    ids: Optional[List[str]] = None
    title: str = ""
    authors: Optional[List[str]] = None
    team: str = ""
    fromdate: Optional[datetime] = None
    todate: Optional[datetime] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json")


class SearchQuery(BaseModel):
    """
    Free-text search request for the search service.

    Only `query` is populated by the gateway today; the filter fields exist
    in the contract so the search service can accept them once they are
    threaded through.
    """

    query: str
    authors: Optional[List[str]] = None
    team: str = ""
    fromdate: Optional[datetime] = None
    todate: Optional[datetime] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json")
