"""Course service — a user's list of courses."""

from nerv.db.models import Course
from nerv.services.owned_resource import OwnedResourceService


class CourseService(OwnedResourceService[Course]):
    model = Course
    resource = "course"
    updatable = frozenset({"title"})
