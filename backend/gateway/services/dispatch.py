"""
Notes Gateway — Operation Dispatcher
=====================================

What:  The named entry points (`notes`, `search`, `createNote`, `updateNote`,
       `deleteNote`) and the table that routes each one to its handler.
How:   The Dispatcher is built once at startup with an explicit
       Operation → (argument model, handler) mapping. Executing an operation:
           1. Look up the operation by name
           2. Validate the field selection and the arguments
           3. Run the handler (normalize → backend → notify → adapt)
           4. Project the resulting NoteResolver(s) onto the selected fields
Who:   Called by POST /api/operations.

Error Handling Strategy:
    Every GatewayError raised while executing becomes an entry in the
    OperationResult's `errors` with `data` set to None. The failure stays in
    the request that caused it; concurrent operations are unaffected.
    Exceptions that are not GatewayErrors are bugs and propagate to the
    global exception handler.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gateway.exceptions import GatewayError, ValidationError
from gateway.schemas.note import DeleteNoteArgs, NoteInputArgs, NotesArgs, SearchArgs
from gateway.services.identity import CallerIdentity
from gateway.services.note_resolver import NOTE_FIELDS, NoteResolver
from gateway.services.record_gateway import RecordGateway
from gateway.services.search_gateway import SearchGateway

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


class Operation(str, Enum):
    """Entry point names of the external schema."""

    NOTES = "notes"
    SEARCH = "search"
    CREATE_NOTE = "createNote"
    UPDATE_NOTE = "updateNote"
    DELETE_NOTE = "deleteNote"

    @property
    def kind(self) -> OperationKind:
        if self in (Operation.NOTES, Operation.SEARCH):
            return OperationKind.QUERY
        return OperationKind.MUTATION


Resolved = Union[NoteResolver, List[NoteResolver]]
Handler = Callable[[Any, CallerIdentity], Awaitable[Resolved]]


@dataclass(frozen=True)
class OperationEntry:
    arguments: Type[BaseModel]
    handler: Handler


@dataclass
class OperationResult:
    """Outcome of one operation: projected data, or the errors that stopped it."""

    operation: str
    data: Any = None
    errors: List[GatewayError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Dispatcher:
    """
    Routes operation names to handlers through a fixed table.

    The table is the only place an operation name is interpreted; there is
    no attribute lookup by name.
    """

    def __init__(self, record_gateway: RecordGateway, search_gateway: SearchGateway):
        self.record_gateway = record_gateway
        self.search_gateway = search_gateway
        self._operations: Dict[Operation, OperationEntry] = {
            Operation.NOTES: OperationEntry(NotesArgs, record_gateway.list_notes),
            Operation.SEARCH: OperationEntry(SearchArgs, self._search),
            Operation.CREATE_NOTE: OperationEntry(NoteInputArgs, record_gateway.create_note),
            Operation.UPDATE_NOTE: OperationEntry(NoteInputArgs, record_gateway.update_note),
            Operation.DELETE_NOTE: OperationEntry(DeleteNoteArgs, record_gateway.delete_note),
        }

    async def _search(self, args: SearchArgs, caller: CallerIdentity) -> List[NoteResolver]:
        return await self.search_gateway.search(args)

    def describe(self) -> List[Dict[str, Any]]:
        """Name, kind and argument names of every entry point."""
        return [
            {
                "name": operation.value,
                "kind": operation.kind.value,
                "arguments": [
                    info.alias or name
                    for name, info in entry.arguments.model_fields.items()
                ],
            }
            for operation, entry in self._operations.items()
        ]

    async def execute(
        self,
        operation_name: str,
        arguments: Optional[Dict[str, Any]],
        caller: CallerIdentity,
        fields: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        """
        Run one operation to completion.

        Returns:
            OperationResult with `data` as a list of dicts for queries and a
            dict for mutations, or with `errors` if any step failed.
        """
        try:
            operation = self._lookup(operation_name)
            entry = self._operations[operation]
            check_fields(fields)
            args = self._parse_arguments(operation, entry, arguments or {})

            resolved = await entry.handler(args, caller)
            data = project(resolved, fields)

        except GatewayError as e:
            logger.warning(
                "Operation %s failed: [%s] %s | Context: %s",
                operation_name,
                e.code,
                e.message,
                e.context,
            )
            return OperationResult(operation=operation_name, errors=[e])

        return OperationResult(operation=operation_name, data=data)

    def _lookup(self, operation_name: str) -> Operation:
        try:
            return Operation(operation_name)
        except ValueError:
            raise ValidationError(
                message=f"Unknown operation '{operation_name}'",
                field="operation",
                context={"allowed_operations": [op.value for op in Operation]},
            )

    def _parse_arguments(
        self, operation: Operation, entry: OperationEntry, arguments: Dict[str, Any]
    ) -> BaseModel:
        try:
            return entry.arguments.model_validate(arguments)
        except PydanticValidationError as e:
            raise ValidationError(
                message=f"Invalid arguments for '{operation.value}'",
                field="arguments",
                context={
                    "errors": [
                        {
                            "argument": ".".join(str(part) for part in err["loc"]),
                            "message": err["msg"],
                        }
                        for err in e.errors()
                    ]
                },
            )


def check_fields(fields: Optional[Sequence[str]]) -> None:
    """Rejects unknown Note field names before anything runs."""
    if fields is None:
        return
    unknown = [name for name in fields if name not in NOTE_FIELDS]
    if unknown:
        raise ValidationError(
            message=f"Note has no field '{unknown[0]}'",
            field=unknown[0],
            context={"allowed_fields": list(NOTE_FIELDS)},
        )


def project(resolved: Resolved, fields: Optional[Sequence[str]]) -> Any:
    if isinstance(resolved, list):
        return [resolver.resolve(fields) for resolver in resolved]
    return resolved.resolve(fields)
