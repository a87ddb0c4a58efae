from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from fintrack.core.responses import ok
from fintrack.db.session import get_db
from fintrack.routers.deps import CurrentUser, current_user
from fintrack.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _transaction_service(db: Session = Depends(get_db)) -> TransactionService:
    return TransactionService(db)


@router.get("")
def list_transactions(
    description: str = "",
    user: CurrentUser = Depends(current_user),
    svc: TransactionService = Depends(_transaction_service),
):
    return ok(svc.list(user.id, description=description), total=svc.total(user.id))


@router.get("/{transaction_id}")
def detail(
    transaction_id: int,
    user: CurrentUser = Depends(current_user),
    svc: TransactionService = Depends(_transaction_service),
):
    return ok(svc.detail(user.id, transaction_id))


@router.post("")
def create(
    payload: Optional[dict] = Body(None),
    user: CurrentUser = Depends(current_user),
    svc: TransactionService = Depends(_transaction_service),
):
    return ok(svc.create(user.id, payload or {}))


@router.patch("/{transaction_id}")
def edit(
    transaction_id: int,
    payload: Optional[dict] = Body(None),
    user: CurrentUser = Depends(current_user),
    svc: TransactionService = Depends(_transaction_service),
):
    return ok(svc.edit(user.id, transaction_id, payload or {}))


@router.delete("")
def destroy(
    payload: Optional[dict] = Body(None),
    user: CurrentUser = Depends(current_user),
    svc: TransactionService = Depends(_transaction_service),
):
    body = payload or {}
    return ok(svc.destroy(user.id, body.get("ids")))
