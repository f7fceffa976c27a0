"""
Notes Gateway — Note Response Adapter
======================================

What:  Read-only wrapper around one backend Note exposing one accessor per
       field of the external `Note` type.
How:   Each accessor is a direct projection of the wrapped record. Fields are
       only computed when selected, through an explicit name → accessor table.
Who:   Returned by RecordGateway/SearchGateway; projected by the Dispatcher.

Projections:
    dateCreated / dateModified → float seconds since epoch
    image                      → str view of the raw bytes (no validation)
    tags                       → always [] (tags are not exposed yet)
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from gateway.exceptions import ValidationError
from gateway.models.note import Note


class NoteResolver:
    """Exposes the external schema's fields of a single Note."""

    __slots__ = ("note",)

    def __init__(self, note: Note):
        self.note = note

    def id(self) -> str:
        return self.note.id

    def title(self) -> str:
        return self.note.title

    def body(self) -> str:
        return self.note.body

    def author(self) -> str:
        return self.note.author

    def team(self) -> str:
        return self.note.team

    def date_created(self) -> float:
        return float(int(self.note.date_created.timestamp()))

    def date_modified(self) -> float:
        return float(int(self.note.date_modified.timestamp()))

    def type(self) -> str:
        return self.note.type

    def link(self) -> str:
        return self.note.link

    def image(self) -> str:
        # Byte-for-byte view: invalid UTF-8 becomes lone surrogates instead of
        # raising, and normalize.to_bytes() turns them back into the same bytes.
        return self.note.image.decode("utf-8", errors="surrogateescape")

    def tags(self) -> List[str]:
        # TODO: project self.note.tags once the record service returns them.
        return []

    def resolve(self, fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """
        Projects the selected schema fields into a dict.

        Args:
            fields: External field names (e.g. "dateCreated"). None selects all.

        Raises:
            ValidationError: A field name is not part of the Note type.
        """
        selected = NOTE_FIELDS if fields is None else fields
        result: Dict[str, Any] = {}
        for name in selected:
            accessor = _ACCESSORS.get(name)
            if accessor is None:
                raise ValidationError(
                    message=f"Note has no field '{name}'",
                    field=name,
                    context={"allowed_fields": list(NOTE_FIELDS)},
                )
            result[name] = accessor(self)
        return result

    def __repr__(self) -> str:
        return f"<NoteResolver(id='{self.note.id}')>"


_ACCESSORS: Dict[str, Callable[[NoteResolver], Any]] = {
    "id": NoteResolver.id,
    "title": NoteResolver.title,
    "body": NoteResolver.body,
    "author": NoteResolver.author,
    "team": NoteResolver.team,
    "dateCreated": NoteResolver.date_created,
    "dateModified": NoteResolver.date_modified,
    "type": NoteResolver.type,
    "link": NoteResolver.link,
    "image": NoteResolver.image,
    "tags": NoteResolver.tags,
}

# Field order of the external Note type.
NOTE_FIELDS = tuple(_ACCESSORS)
