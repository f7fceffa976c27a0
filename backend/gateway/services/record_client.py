"""
Notes Gateway — Record Service HTTP Client
===========================================

What:  RecordService implementation speaking JSON over HTTP.
How:   RPC-style POST endpoints; the note id always travels in the body.

Endpoints (relative to RECORD_SERVICE_URL):
    POST /notes/query    Query → {"notes": [Note, ...]}
    POST /notes/create   Note  → Note
    POST /notes/update   Note  → Note
    POST /notes/delete   Note  → Note
    GET  /health         → 200 when ready
"""

from typing import List

from gateway.models.note import Note, NoteList, Query
from gateway.services.backends import RecordService
from gateway.services.http_client import HttpServiceClient


class HttpRecordService(HttpServiceClient, RecordService):
    service_name = "record service"

    async def list_notes(self, query: Query) -> List[Note]:
        result = await self._post("/notes/query", query.to_wire(), NoteList)
        return result.notes

    async def create_note(self, note: Note) -> Note:
        return await self._post("/notes/create", note.to_wire(), Note)

    async def update_note(self, note: Note) -> Note:
        return await self._post("/notes/update", note.to_wire(), Note)

    async def delete_note(self, note: Note) -> Note:
        return await self._post("/notes/delete", note.to_wire(), Note)
