"""Assignment API routes.

Listing is ordered by due date (soonest first). Creating an assignment
requires title and dueDate; status defaults to "pending".
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from nerv.auth.dependencies import CurrentIdentity, get_current_user
from nerv.db.engine import get_db
from nerv.errors import NotFoundOrNotOwned
from nerv.schemas.assignment import AssignmentCreate, AssignmentRead, AssignmentUpdate
from nerv.services.assignment_service import AssignmentService

router = APIRouter(prefix="/assignments")

NOT_FOUND = "Assignment not found"


def _svc(db: AsyncSession = Depends(get_db)) -> AssignmentService:
    return AssignmentService(db)


@router.get("", response_model=list[AssignmentRead])
async def list_assignments(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AssignmentService = Depends(_svc),
):
    return await svc.list_by_owner(identity.user_id)


@router.post("", response_model=AssignmentRead, status_code=201)
async def create_assignment(
    body: AssignmentCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AssignmentService = Depends(_svc),
):
    return await svc.create(identity.user_id, **body.model_dump())


@router.get("/{assignment_id}", response_model=AssignmentRead)
async def get_assignment(
    assignment_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AssignmentService = Depends(_svc),
):
    assignment = await svc.get_by_id_for_owner(assignment_id, identity.user_id)
    if not assignment:
        raise NotFoundOrNotOwned(NOT_FOUND)
    return assignment


@router.api_route(
    "/{assignment_id}", methods=["PUT", "PATCH"], response_model=AssignmentRead
)
async def update_assignment(
    assignment_id: str,
    body: AssignmentUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AssignmentService = Depends(_svc),
):
    """Apply the fields present in the body; stamps updatedAt."""
    assignment = await svc.update_by_id_for_owner(
        assignment_id, identity.user_id, **body.changes()
    )
    if not assignment:
        raise NotFoundOrNotOwned(NOT_FOUND)
    return assignment


@router.delete("/{assignment_id}", status_code=204)
async def delete_assignment(
    assignment_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AssignmentService = Depends(_svc),
):
    if not await svc.delete_by_id_for_owner(assignment_id, identity.user_id):
        raise NotFoundOrNotOwned(NOT_FOUND)
    return Response(status_code=204)
