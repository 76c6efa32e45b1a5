"""
api/routes/v1/forms.py -- Form routes for the FormBot REST API.

Routes:
  POST   /forms            -- create a form inside one of the caller's folders
  GET    /forms/{form_id}  -- form detail
  DELETE /forms/{form_id}  -- delete a form

Every route requires a bearer token. A form may only be created in a folder
the caller owns, and only its owner may read or delete it.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.models import FormCreate, FormCreatedResponse, FormEnvelope, FormResponse, MessageResponse
from api.routes.v1.folders import load_owned_folder
from auth.dependencies import get_current_user, get_identity
from auth.models import Identity, User
from auth.ownership import ensure_owner
from core.errors import NotFoundError
from forms.models import Form
from forms.store import FormStore

logger = logging.getLogger("formbot.api")

router = APIRouter()


def _load_owned_form(store: FormStore, form_id: str, identity: Identity, action: str) -> Form:
    form = store.get_form(form_id)
    if form is None:
        raise NotFoundError("Form not found")
    ensure_owner(identity, form.owner_id, action)
    return form


@router.post("/forms", response_model=FormCreatedResponse)
def create_form(
    request: Request,
    body: FormCreate,
    current_user: User = Depends(get_current_user),
) -> FormCreatedResponse:
    """Create a form. The target folder must exist and belong to the caller."""
    store: FormStore = request.app.state.form_store
    load_owned_folder(store, body.folder_id, Identity(user_id=current_user.id), "add forms to this folder")

    form = Form(
        name=body.name,
        owner_id=current_user.id,
        folder_id=body.folder_id,
        fields=[f.model_dump(mode="json") for f in body.fields],
    )
    form_id = store.create_form(form)
    if form_id is None:
        raise NotFoundError("Folder not found")
    created = store.get_form(form_id)
    logger.info("Form created form_id=%s folder_id=%s user_id=%s", form_id, body.folder_id, current_user.id)
    return FormCreatedResponse(message="Form created successfully", form=FormResponse.from_form(created))


@router.get("/forms/{form_id}", response_model=FormEnvelope)
def get_form(request: Request, form_id: str, identity: Identity = Depends(get_identity)) -> FormEnvelope:
    store: FormStore = request.app.state.form_store
    form = _load_owned_form(store, form_id, identity, "view this form")
    return FormEnvelope(form=FormResponse.from_form(form))


@router.delete("/forms/{form_id}", response_model=MessageResponse)
def delete_form(request: Request, form_id: str, identity: Identity = Depends(get_identity)) -> MessageResponse:
    store: FormStore = request.app.state.form_store
    _load_owned_form(store, form_id, identity, "delete this form")
    if not store.delete_form(form_id):
        raise NotFoundError("Form not found")
    logger.info("Form deleted form_id=%s user_id=%s", form_id, identity.user_id)
    return MessageResponse(message="Form deleted")
