"""Course API routes.

Learn: Routes handle HTTP concerns (status codes, 404s); CourseService does the
owner-scoped persistence. A course that exists but belongs to someone
else answers exactly like one that does not exist.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from nerv.auth.dependencies import CurrentIdentity, get_current_user
from nerv.db.engine import get_db
from nerv.errors import NotFoundOrNotOwned
from nerv.schemas.course import CourseCreate, CourseRead, CourseUpdate
from nerv.services.course_service import CourseService

router = APIRouter(prefix="/courses")

NOT_FOUND = "Course not found"


def _svc(db: AsyncSession = Depends(get_db)) -> CourseService:
    return CourseService(db)


@router.get("", response_model=list[CourseRead])
async def list_courses(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    return await svc.list_by_owner(identity.user_id)


@router.post("", response_model=CourseRead, status_code=201)
async def create_course(
    body: CourseCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    return await svc.create(identity.user_id, title=body.title)


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(
    course_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.get_by_id_for_owner(course_id, identity.user_id)
    if not course:
        raise NotFoundOrNotOwned(NOT_FOUND)
    return course


@router.api_route("/{course_id}", methods=["PUT", "PATCH"], response_model=CourseRead)
async def update_course(
    course_id: str,
    body: CourseUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.update_by_id_for_owner(course_id, identity.user_id, **body.changes())
    if not course:
        raise NotFoundOrNotOwned(NOT_FOUND)
    return course


@router.delete("/{course_id}", status_code=204)
async def delete_course(
    course_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CourseService = Depends(_svc),
):
    if not await svc.delete_by_id_for_owner(course_id, identity.user_id):
        raise NotFoundOrNotOwned(NOT_FOUND)
    return Response(status_code=204)
