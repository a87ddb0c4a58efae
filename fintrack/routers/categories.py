from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from fintrack.core.responses import ok
from fintrack.db.session import get_db
from fintrack.routers.deps import CurrentUser, current_user
from fintrack.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def _category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


@router.get("")
def list_categories(name: str = "", svc: CategoryService = Depends(_category_service)):
    return ok(svc.list(name=name))


@router.post("/bulk")
def bulk_create(user: CurrentUser = Depends(current_user), svc: CategoryService = Depends(_category_service)):
    return ok(svc.bulk_create(user.id))


@router.get("/{category_id}")
def detail(category_id: int, svc: CategoryService = Depends(_category_service)):
    return ok(svc.detail(category_id))


@router.post("")
def create(payload: Optional[dict] = Body(None), svc: CategoryService = Depends(_category_service)):
    body = payload or {}
    return ok(
        svc.create(
            body.get("name"),
            user_id=body.get("user_id"),
            type=body.get("type"),
            icon=body.get("icon"),
        )
    )


@router.patch("/{category_id}")
def edit(category_id: int, payload: Optional[dict] = Body(None), svc: CategoryService = Depends(_category_service)):
    body = payload or {}
    return ok(svc.edit(category_id, name=body.get("name"), type=body.get("type"), picture=body.get("picture")))


@router.delete("")
def destroy(payload: Optional[dict] = Body(None), svc: CategoryService = Depends(_category_service)):
    body = payload or {}
    return ok(svc.destroy(body.get("ids")))
