"""
api/routes/v1/folders.py -- Folder routes for the FormBot REST API.

Routes:
  GET    /folders                    -- list the caller's folders
  POST   /folder, /folders           -- create a folder
  GET    /folders/{folder_id}        -- folder detail
  DELETE /folders/{folder_id}        -- delete a folder and its forms
  GET    /folders/{folder_id}/forms  -- forms inside a folder

Every route requires a bearer token. Any route that addresses one folder by
id loads it, then calls ensure_owner() before doing anything else -- a folder
belonging to someone else is a 403 and is left untouched.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError

from api.models import (
    FolderCreate,
    FolderCreatedResponse,
    FolderEnvelope,
    FolderListResponse,
    FolderResponse,
    FormListResponse,
    FormResponse,
    MessageResponse,
)
from auth.dependencies import get_current_user, get_identity
from auth.models import Identity, User
from auth.ownership import ensure_owner
from core.errors import ConflictError, NotFoundError
from forms.models import Folder
from forms.store import FormStore

logger = logging.getLogger("formbot.api")

router = APIRouter()


def load_owned_folder(store: FormStore, folder_id: str, identity: Identity, action: str) -> Folder:
    """Fetch a folder and verify the caller owns it. 404 / 403 otherwise."""
    folder = store.get_folder(folder_id)
    if folder is None:
        raise NotFoundError("Folder not found")
    ensure_owner(identity, folder.owner_id, action)
    return folder


@router.get("/folders", response_model=FolderListResponse)
def list_folders(request: Request, identity: Identity = Depends(get_identity)) -> FolderListResponse:
    store: FormStore = request.app.state.form_store
    folders = store.list_folders(identity.user_id)
    return FolderListResponse(folders=[FolderResponse.from_folder(f) for f in folders])


@router.post("/folder", response_model=FolderCreatedResponse)
@router.post("/folders", response_model=FolderCreatedResponse)
def create_folder(
    request: Request,
    body: FolderCreate,
    current_user: User = Depends(get_current_user),
) -> FolderCreatedResponse:
    """Create a folder owned by the caller. Names are unique per owner.

    Uses get_current_user (not just the token) so a folder can only ever be
    attached to an account that exists.
    """
    store: FormStore = request.app.state.form_store
    if store.get_folder_by_name(current_user.id, body.name) is not None:
        raise ConflictError("Folder already exists")
    try:
        folder_id = store.create_folder(Folder(name=body.name, owner_id=current_user.id))
    except IntegrityError as exc:
        raise ConflictError("Folder already exists") from exc

    folder = store.get_folder(folder_id)
    logger.info("Folder created folder_id=%s user_id=%s", folder_id, current_user.id)
    return FolderCreatedResponse(message="Folder created", folder=FolderResponse.from_folder(folder))


@router.get("/folders/{folder_id}", response_model=FolderEnvelope)
def get_folder(request: Request, folder_id: str, identity: Identity = Depends(get_identity)) -> FolderEnvelope:
    store: FormStore = request.app.state.form_store
    folder = load_owned_folder(store, folder_id, identity, "view this folder")
    return FolderEnvelope(folder=FolderResponse.from_folder(folder))


@router.delete("/folders/{folder_id}", response_model=MessageResponse)
def delete_folder(request: Request, folder_id: str, identity: Identity = Depends(get_identity)) -> MessageResponse:
    """Delete a folder and every form in it. Owner only."""
    store: FormStore = request.app.state.form_store
    load_owned_folder(store, folder_id, identity, "delete this folder")
    if not store.delete_folder(folder_id):
        # Deleted by a concurrent request between the load and here.
        raise NotFoundError("Folder not found")
    logger.info("Folder deleted folder_id=%s user_id=%s", folder_id, identity.user_id)
    return MessageResponse(message="Folder deleted")


@router.get("/folders/{folder_id}/forms", response_model=FormListResponse)
def list_folder_forms(
    request: Request,
    folder_id: str,
    identity: Identity = Depends(get_identity),
) -> FormListResponse:
    store: FormStore = request.app.state.form_store
    load_owned_folder(store, folder_id, identity, "view this folder")
    return FormListResponse(forms=[FormResponse.from_form(f) for f in store.list_forms(folder_id)])
