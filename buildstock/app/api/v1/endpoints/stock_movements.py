from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from buildstock.app.api.deps import get_db, get_current_user_id
from buildstock.app.db.session import commit_or_rollback
from buildstock.app.schemas.movement import MovementCreate, MovementRead
from buildstock.core.config import Settings, get_settings
from buildstock.services.ledger import record_movement, list_movements, DEFAULT_LIST_LIMIT

router = APIRouter(prefix="/stock-movements")


@router.post("")
def create_movement(
    payload: MovementCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user_id: int | None = Depends(get_current_user_id),
):
    """
    Enregistre une entrée ou une sortie.
    Une sortie au-delà du stock courant est refusée sans rien écrire.
    """
    mv = record_movement(
        db,
        material_name=payload.material,
        quantity=payload.quantity,
        movement_type=payload.type,
        user_id=current_user_id if current_user_id is not None else payload.user_id,
        location=payload.location,
        message=payload.message,
        unit=payload.unit,
        settings=settings,
    )
    commit_or_rollback(db)
    return {"success": True, "id": int(mv.id)}


@router.get("", response_model=list[MovementRead])
def get_movements(
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=DEFAULT_LIST_LIMIT),
    db: Session = Depends(get_db),
):
    return list_movements(db, limit=limit)
