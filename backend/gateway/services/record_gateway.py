"""
Notes Gateway — Record Gateway Adapter
=======================================

What:  Runs the record-service operations: list, create, update, delete.
How:   For each operation: normalize arguments → call the record service →
       (mutations) notify → wrap the result in NoteResolver(s).
Who:   Called by the Dispatcher for `notes`, `createNote`, `updateNote`,
       `deleteNote`.

Operation Flow (mutations):
    ┌────────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐
    │ Normalize  │───▶│ Record       │───▶│ Notifier     │───▶│ NoteResolver │
    │ arguments  │    │ service call │    │ (once)       │    │ wrap         │
    └────────────┘    └──────────────┘    └──────────────┘    └──────────────┘

    Record service fails → BackendError, nothing is published
    Publish fails        → PublishError, the stored change stays

Which note gets published:
    createNote   the backend-returned note (create channel, if enabled)
    updateNote   the note as requested
    deleteNote   the backend-returned note

RecordGateway holds no per-request state; one instance serves all
concurrent requests.
"""

import logging
from typing import List

from gateway.models.note import Note, Query
from gateway.schemas.note import DeleteNoteArgs, NoteInputArgs, NotesArgs
from gateway.services.backends import RecordService
from gateway.services.identity import CallerIdentity, resolve_author, resolve_authors
from gateway.services.normalize import (
    to_bytes,
    to_range,
    to_string,
    to_string_list,
    to_timestamp,
)
from gateway.services.note_resolver import NoteResolver
from gateway.services.publisher import MutationNotifier

logger = logging.getLogger(__name__)


class RecordGateway:
    """
    Translates note operations into record service calls.

    Error Handling Strategy:
        BackendError from the record service and PublishError from the
        notifier propagate unchanged; the Dispatcher turns them into
        operation errors. Identity errors are raised before any backend call.
    """

    def __init__(self, record_service: RecordService, notifier: MutationNotifier):
        self.record_service = record_service
        self.notifier = notifier

    async def list_notes(self, args: NotesArgs, caller: CallerIdentity) -> List[NoteResolver]:
        """
        List notes matching the filters.

        `authors` defaults to the caller. Results keep the backend's order.

        Raises:
            MissingIdentityError: No `authors` and no caller identity
            BackendError: Record service call failed
        """
        fromdate, todate = to_range(args.fromdate, args.todate)
        query = Query(
            ids=to_string_list(args.ids),
            title=to_string(args.title),
            authors=resolve_authors(args.authors, caller),
            team=to_string(args.team),
            fromdate=fromdate,
            todate=todate,
        )

        notes = await self.record_service.list_notes(query)
        logger.info("Listed %d notes", len(notes))
        return [NoteResolver(note) for note in notes]

    def build_note(self, args: NoteInputArgs, caller: CallerIdentity) -> Note:
        """Full Note for create/update, every absent argument normalized."""
        return Note(
            id=to_string(args.id),
            title=to_string(args.title),
            body=to_string(args.body),
            author=resolve_author(args.author, caller),
            team=to_string(args.team),
            type=to_string(args.type),
            link=to_string(args.link),
            image=to_bytes(args.image),
            tags=to_string_list(args.tags) or [],
            date_created=to_timestamp(args.date_created),
            date_modified=to_timestamp(args.date_modified),
        )

    async def create_note(self, args: NoteInputArgs, caller: CallerIdentity) -> NoteResolver:
        """
        Create a note; `author` defaults to the caller.

        Returns the note as the record service stored it (it may carry an
        assigned id).
        """
        note = self.build_note(args, caller)
        created = await self.record_service.create_note(note)
        logger.info("Created note %s", created.id)

        await self.notifier.notify_created(created)
        return NoteResolver(created)

    async def update_note(self, args: NoteInputArgs, caller: CallerIdentity) -> NoteResolver:
        """
        Update a note and publish the requested note to the update channel.

        Raises:
            BackendError: Update failed (nothing published)
            PublishError: Update stored, notification failed
        """
        note = self.build_note(args, caller)
        updated = await self.record_service.update_note(note)
        logger.info("Updated note %s", updated.id)

        await self.notifier.notify_updated(note)
        return NoteResolver(updated)

    async def delete_note(self, args: DeleteNoteArgs, caller: CallerIdentity) -> NoteResolver:
        """
        Delete a note and publish the deleted record to the delete channel.

        The delete payload leaves out team, link, image and tags.

        Raises:
            BackendError: Delete failed (nothing published)
            PublishError: Delete done, notification failed
        """
        note = Note(
            id=to_string(args.id),
            title=to_string(args.title),
            body=to_string(args.body),
            author=resolve_author(args.author, caller),
            type=to_string(args.type),
            date_created=to_timestamp(args.date_created),
            date_modified=to_timestamp(args.date_modified),
        )
        deleted = await self.record_service.delete_note(note)
        logger.info("Deleted note %s", deleted.id)

        await self.notifier.notify_deleted(deleted)
        return NoteResolver(deleted)
