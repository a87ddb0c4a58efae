from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from fintrack.core.responses import ok
from fintrack.db.session import get_db
from fintrack.routers.deps import CurrentUser, current_user, require_admin
from fintrack.services.auth_service import AuthService

router = APIRouter(tags=["auth"])


def _auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register")
def register(payload: Optional[dict] = Body(None), svc: AuthService = Depends(_auth_service)):
    body = payload or {}
    result = svc.register(body.get("email"), body.get("name"), body.get("password"))
    return ok(result.user, type=result.type, token=result.token)


@router.post("/users")
def add_user(
    payload: Optional[dict] = Body(None),
    svc: AuthService = Depends(_auth_service),
    _admin: CurrentUser = Depends(require_admin),
):
    body = payload or {}
    return ok(svc.add_user(body.get("email"), body.get("name"), body.get("password")))


@router.post("/login")
def login(payload: Optional[dict] = Body(None), svc: AuthService = Depends(_auth_service)):
    body = payload or {}
    result = svc.login(body.get("email"), body.get("password"))
    return ok(result.user, type=result.type, token=result.token)


@router.post("/login/admin")
def login_admin(payload: Optional[dict] = Body(None), svc: AuthService = Depends(_auth_service)):
    body = payload or {}
    result = svc.login_admin(body.get("email"), body.get("password"))
    return ok(type=result.type, token=result.token)


@router.get("/profile")
def profile(user: CurrentUser = Depends(current_user), svc: AuthService = Depends(_auth_service)):
    return ok(svc.profile(user.id))


@router.patch("/profile")
def edit_profile(
    payload: Optional[dict] = Body(None),
    user: CurrentUser = Depends(current_user),
    svc: AuthService = Depends(_auth_service),
):
    body = payload or {}
    return ok(svc.edit_profile(user.id, name=body.get("name"), picture=body.get("picture")))
