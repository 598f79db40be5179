from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from buildstock.app.api.deps import get_db
from buildstock.app.db.session import commit_or_rollback
from buildstock.app.schemas.material import MaterialRead, MaterialLimitsUpdate
from buildstock.services.catalog import list_active_materials, update_limits, deactivate_material

router = APIRouter(prefix="/materials")


@router.get("", response_model=list[MaterialRead])
def list_materials(db: Session = Depends(get_db)):
    return list_active_materials(db)


@router.put("/{material_id}/limits", response_model=MaterialRead)
def set_material_limits(material_id: int, payload: MaterialLimitsUpdate, db: Session = Depends(get_db)):
    material = update_limits(db, material_id, min_stock=payload.min_stock, max_stock=payload.max_stock)
    commit_or_rollback(db)
    db.refresh(material)
    return material


@router.delete("/{material_id}", response_model=MaterialRead)
def delete_material(material_id: int, db: Session = Depends(get_db)):
    """Soft delete : le matériau reste en base pour l'historique."""
    material = deactivate_material(db, material_id)
    commit_or_rollback(db)
    db.refresh(material)
    return material
