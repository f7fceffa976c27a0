"""
Notes Gateway — Caller Identity Resolver
=========================================

What:  Derives the acting author from the authenticated caller when the
       operation arguments do not name one.
How:   The HTTP layer builds a CallerIdentity from the identity header and
       passes it explicitly into every entry point; nothing here reads
       request-global state.
Who:   Used by RecordGateway for `notes`, `createNote`, `updateNote` and
       `deleteNote`.

Policy (applied uniformly to every author-bearing operation):
    explicit value given      → use it
    absent, caller known      → caller's email
    absent, caller unknown    → MissingIdentityError (request fails, process lives)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from gateway.exceptions import MissingIdentityError
from gateway.services.normalize import to_string_list


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated caller of one request."""

    email: Optional[str] = None

    @classmethod
    def from_header(cls, value: Optional[str]) -> "CallerIdentity":
        if value is None or not value.strip():
            return cls()
        return cls(email=value.strip())

    @property
    def is_anonymous(self) -> bool:
        return not self.email

    def require_email(self) -> str:
        if self.is_anonymous:
            raise MissingIdentityError()
        return self.email


ANONYMOUS = CallerIdentity()


def resolve_authors(
    explicit_authors: Optional[Sequence[Optional[str]]],
    caller: CallerIdentity,
) -> List[str]:
    """
    Author filter for a note listing.

    A given list is used as-is after dropping None entries, even when that
    leaves it empty. Only an absent list falls back to the caller.
    """
    authors = to_string_list(explicit_authors)
    if authors is not None:
        return authors
    return [caller.require_email()]


def resolve_author(explicit_author: Optional[str], caller: CallerIdentity) -> str:
    """Author of a mutation; an empty string counts as absent."""
    if explicit_author:
        return explicit_author
    return caller.require_email()
