from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from buildstock.app.api.deps import get_db
from buildstock.app.schemas.stock import StockSummaryRead, DashboardRead
from buildstock.services.stock import stock_summary, dashboard

router = APIRouter(prefix="/stock")


@router.get(
    "",
    response_model=list[StockSummaryRead],
)
def get_stock(db: Session = Depends(get_db)):
    """
    Stock courant (READ ONLY)
    - total recalculé depuis le ledger à chaque appel
    - matériaux sans mouvement inclus (total = 0)
    """
    return stock_summary(db)


@router.get("/dashboard", response_model=DashboardRead)
def get_dashboard(db: Session = Depends(get_db)):
    return dashboard(db)
