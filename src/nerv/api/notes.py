"""Note API routes. Notes are listed newest first."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from nerv.auth.dependencies import CurrentIdentity, get_current_user
from nerv.db.engine import get_db
from nerv.errors import NotFoundOrNotOwned
from nerv.schemas.note import NoteCreate, NoteRead, NoteUpdate
from nerv.services.note_service import NoteService

router = APIRouter(prefix="/notes")

NOT_FOUND = "Note not found"


def _svc(db: AsyncSession = Depends(get_db)) -> NoteService:
    return NoteService(db)


@router.get("", response_model=list[NoteRead])
async def list_notes(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    return await svc.list_by_owner(identity.user_id)


@router.post("", response_model=NoteRead, status_code=201)
async def create_note(
    body: NoteCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    return await svc.create(identity.user_id, **body.model_dump())


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    note = await svc.get_by_id_for_owner(note_id, identity.user_id)
    if not note:
        raise NotFoundOrNotOwned(NOT_FOUND)
    return note


@router.api_route("/{note_id}", methods=["PUT", "PATCH"], response_model=NoteRead)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    note = await svc.update_by_id_for_owner(note_id, identity.user_id, **body.changes())
    if not note:
        raise NotFoundOrNotOwned(NOT_FOUND)
    return note


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: NoteService = Depends(_svc),
):
    if not await svc.delete_by_id_for_owner(note_id, identity.user_id):
        raise NotFoundOrNotOwned(NOT_FOUND)
    return Response(status_code=204)
