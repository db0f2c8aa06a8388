"""Assignment service — coursework with deadlines and a status.

Learn: Assignments are listed by due date, soonest first, with creation time as
the tie-breaker. Every successful update stamps updated_at.
"""

from nerv.db.models import Assignment
from nerv.services.owned_resource import OwnedResourceService


class AssignmentService(OwnedResourceService[Assignment]):
    model = Assignment
    resource = "assignment"
    updatable = frozenset(
        {"title", "description", "due_date", "course_title", "status"}
    )
    stamps_updated_at = True

    def ordering(self) -> tuple:
        return (Assignment.due_date.asc(), Assignment.created_at.asc())
