"""Note service — free-form notes, optionally tagged with a course and a link."""

from nerv.db.models import Note
from nerv.services.owned_resource import OwnedResourceService


class NoteService(OwnedResourceService[Note]):
    model = Note
    resource = "note"
    updatable = frozenset({"title", "content", "course", "link"})

    def ordering(self) -> tuple:
        # Newest first.
        return (Note.created_at.desc(),)
