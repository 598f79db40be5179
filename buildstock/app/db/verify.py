"""
Rapport de vérification de la base (console).

    python -m buildstock.app.db.verify
"""

from __future__ import annotations

from sqlalchemy import inspect, select
from sqlalchemy.engine import Engine

from buildstock.app.db.models.models_v1 import Material, User
from buildstock.app.db.session import SessionLocal, engine
from buildstock.services.ledger import list_movements
from buildstock.services.stock import stock_summary


def _rule(width: int) -> None:
    print("-" * width)


def run_verify(bind: Engine = engine):
    db = SessionLocal(bind=bind)
    try:
        print("=== DATABASE CHECK ===\n")

        print("TABLES:")
        _rule(50)
        for name in sorted(inspect(bind).get_table_names()):
            print(f"  * {name}")
        _rule(50)

        print("\nUSERS:")
        _rule(80)
        print("ID | Name          | Email                  | Role     | Active")
        for u in db.execute(select(User).order_by(User.name)).scalars():
            print(
                f"{u.id:<2} | {u.name:<13} | {u.email:<22} | {u.role.value:<8} | "
                f"{'yes' if u.active else 'no'}"
            )
        _rule(80)

        # tous les matériaux, inactifs compris
        print("\nMATERIALS:")
        _rule(100)
        print("ID | Name          | Unit    | Min stock   | Max stock   | Active")
        for m in db.execute(select(Material).order_by(Material.name)).scalars():
            max_stock = "-" if m.max_stock is None else m.max_stock
            print(
                f"{m.id:<2} | {m.name:<13} | {m.unit:<7} | {m.min_stock!s:<11} | {max_stock!s:<11} | "
                f"{'yes' if m.active else 'no'}"
            )
        _rule(100)

        movements = list_movements(db)
        print("\nMOVEMENTS:")
        _rule(120)
        print("ID | Material      | Qty      | Unit    | Type     | Location        | User       | Timestamp")
        for r in movements:
            print(
                f"{r.id:<2} | {r.material:<13} | {r.quantity:>8} | {r.unit:<7} | {r.type.value:<8} | "
                f"{(r.location or '-'):<15} | {r.user_name:<10} | {r.timestamp:%Y-%m-%d %H:%M:%S}"
            )
        _rule(120)
        print(f"\nTotal movements: {len(movements)}\n")

        print("CURRENT STOCK:")
        _rule(80)
        print("Material      | Quantity   | Unit    | Min    | Status")
        for s in stock_summary(db):
            print(f"{s.material:<13} | {s.total:>10} | {s.unit:<7} | {s.min_stock:>6} | {s.status.value.upper()}")
        _rule(80)

        print("\nCheck complete.\n")
    finally:
        db.close()


if __name__ == "__main__":
    run_verify()
