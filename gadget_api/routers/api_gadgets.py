from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..deps.auth import require_user
from ..deps.codes import get_code_store
from ..schemas.auth import MessageResponse
from ..schemas.gadget import (
    ConfirmationCodeOut,
    GadgetOut,
    GadgetUpdate,
    GadgetWithProbability,
    SelfDestructRequest,
)
from ..services import gadgets as lifecycle
from ..services.self_destruct import PendingCodeStore

router = APIRouter(prefix="/gadgets", tags=["gadgets"], dependencies=[Depends(require_user)])


@router.get("", response_model=list[GadgetWithProbability], summary="List gadgets with success probabilities")
def api_list(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
):
    return lifecycle.list_gadgets(db, status_filter)


@router.post("", response_model=GadgetOut, status_code=status.HTTP_201_CREATED, summary="Add a gadget")
def api_create(db: Session = Depends(get_db)):
    return lifecycle.create_gadget(db)


@router.patch("/{gadget_id}", response_model=GadgetOut, summary="Update a gadget")
def api_update(gadget_id: str, payload: GadgetUpdate, db: Session = Depends(get_db)):
    return lifecycle.update_gadget(db, gadget_id, payload.model_dump(exclude_none=True))


@router.delete("/{gadget_id}", response_model=MessageResponse, summary="Decommission a gadget")
def api_decommission(gadget_id: str, db: Session = Depends(get_db)):
    lifecycle.decommission_gadget(db, gadget_id)
    return MessageResponse(message="Gadget decommissioned")


@router.post(
    "/{gadget_id}/self-destruct/generate-code",
    response_model=ConfirmationCodeOut,
    summary="Generate a self-destruct confirmation code",
)
def api_generate_code(
    gadget_id: str,
    db: Session = Depends(get_db),
    store: PendingCodeStore = Depends(get_code_store),
):
    code = lifecycle.generate_self_destruct_code(db, store, gadget_id)
    return ConfirmationCodeOut(confirmation_code=code)


@router.post("/{gadget_id}/self-destruct", response_model=MessageResponse, summary="Trigger self-destruct")
def api_self_destruct(
    gadget_id: str,
    payload: SelfDestructRequest,
    db: Session = Depends(get_db),
    store: PendingCodeStore = Depends(get_code_store),
):
    lifecycle.confirm_self_destruct(db, store, gadget_id, payload.confirmation_code)
    return MessageResponse(message="Gadget self-destructed")
