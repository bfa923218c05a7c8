from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..crud.users import authenticate, create_user
from ..db.session import get_db
from ..schemas.auth import Credentials, MessageResponse, RegisterRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def api_register(payload: RegisterRequest, db: Session = Depends(get_db)):
    create_user(db, payload.username, payload.password)
    return MessageResponse(message="User created")


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a JWT")
def api_login(payload: Credentials, db: Session = Depends(get_db)):
    return TokenResponse(token=authenticate(db, payload.username, payload.password))
