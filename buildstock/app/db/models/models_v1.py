from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Boolean,
    Float,
    ForeignKey,
    Text,
    Enum,
    Index,
    CheckConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from buildstock.app.db.base import Base
from buildstock.app.db.models.core_types import Role, MovementType

DEFAULT_UNIT = "un"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- AUTH ----------
class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="role", native_enum=False, length=16),
        default=Role.operator,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


# ---------- CATALOG ----------
class Material(Base):
    __tablename__ = "materials"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(32), default=DEFAULT_UNIT, nullable=False)
    min_stock: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    max_stock: Mapped[float | None] = mapped_column(Float)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


# unicité insensible à la casse
Index("uq_materials_name_lower", func.lower(Material.name), unique=True)


# ---------- LEDGER ----------
class StockMovement(Base):
    """Écriture du ledger : append-only, jamais modifiée."""

    __tablename__ = "stock_movements"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    material_id: Mapped[int] = mapped_column(
        ForeignKey("materials.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))

    # signée : + entrée, - sortie
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    type: Mapped[MovementType] = mapped_column(
        Enum(MovementType, name="movement_type", native_enum=False, length=16),
        nullable=False,
        index=True,
    )
    location: Mapped[str | None] = mapped_column(String(128))
    message: Mapped[str | None] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    material: Mapped[Material] = relationship()
    user: Mapped[User | None] = relationship()

    __table_args__ = (
        CheckConstraint("type IN ('incoming', 'outgoing')", name="ck_stock_movement_type"),
        CheckConstraint("quantity <> 0", name="ck_stock_movement_qty_nonzero"),
    )


Index("ix_stock_movements_timestamp_desc", StockMovement.timestamp.desc())
