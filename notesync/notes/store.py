"""Notes collection kept consistent with the backend by re-fetching.

Consistency policy: the store is never the source of truth after a mutation.
Every successful create/update/delete is followed by a full ``list_notes()``,
so the held collection is always a state the backend confirmed. Ids and
timestamps are never fabricated locally. A failed mutation does not re-list
and leaves the collection untouched.
"""

from __future__ import annotations

from notesync.api.client import ApiClient
from notesync.api.schemas import NoteOut, NoteWrite, decode_list
from notesync.core.constants import MSG_FIELDS_REQUIRED, PATH_NOTE, PATH_NOTES
from notesync.core.exceptions import ValidationFailure
from notesync.core.logging import get_logger
from notesync.core.types import Note

log = get_logger(__name__)


def validate_note_fields(title: str, content: str) -> NoteWrite:
    """Reject empty or whitespace-only fields before any request is issued."""
    missing = [name for name, value in (("title", title), ("content", content)) if not value.strip()]
    if missing:
        raise ValidationFailure(MSG_FIELDS_REQUIRED, context={"missing": missing})
    return NoteWrite(title=title, content=content)


class NotesStore:
    """The authenticated user's notes, as last listed by the backend."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self._notes: tuple[Note, ...] = ()

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    def __len__(self) -> int:
        return len(self._notes)

    def get(self, note_id: str) -> Note | None:
        return next((n for n in self._notes if n.id == note_id), None)

    async def list_notes(self) -> tuple[Note, ...]:
        """Replace the held collection with the backend's, in backend order.

        A response that arrives after the session ended is discarded.
        """
        generation = self._client.session.generation
        payload = await self._client.send(PATH_NOTES)
        notes = tuple(item.to_domain() for item in decode_list(NoteOut, payload))
        if self._client.session.generation != generation:
            log.info("stale_notes_dropped", count=len(notes))
            return self._notes
        self._notes = notes
        log.debug("notes_listed", count=len(self._notes))
        return self._notes

    async def create_note(self, title: str, content: str) -> tuple[Note, ...]:
        body = validate_note_fields(title, content)
        await self._client.send(PATH_NOTES, "POST", body.model_dump())
        log.info("note_created")
        return await self.list_notes()

    async def update_note(self, note_id: str, title: str, content: str) -> tuple[Note, ...]:
        body = validate_note_fields(title, content)
        await self._client.send(PATH_NOTE.format(note_id=note_id), "PUT", body.model_dump())
        log.info("note_updated", note_id=note_id)
        return await self.list_notes()

    async def delete_note(self, note_id: str) -> tuple[Note, ...]:
        """Delete a note. Confirming the deletion is the caller's job."""
        await self._client.send(PATH_NOTE.format(note_id=note_id), "DELETE")
        log.info("note_deleted", note_id=note_id)
        return await self.list_notes()

    def clear(self) -> None:
        self._notes = ()
