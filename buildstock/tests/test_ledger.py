import math

import pytest
from sqlalchemy import select, func

from buildstock.app.db.models.models_v1 import StockMovement, User
from buildstock.app.db.models.core_types import MovementType
from buildstock.core import config
from buildstock.core.config import Settings
from buildstock.services import ledger
from buildstock.services.catalog import get_or_create_material, deactivate_material
from buildstock.services.errors import InsufficientStockError, NotFoundError, ValidationError
from buildstock.services.ledger import record_movement, list_movements
from buildstock.services.validator import check_sufficiency, current_stock


def _movement_count(db_session) -> int:
    return db_session.execute(select(func.count(StockMovement.id))).scalar_one()


def _record(db_session, name, qty, mtype, **kwargs):
    mv = record_movement(db_session, material_name=name, quantity=qty, movement_type=mtype, **kwargs)
    db_session.commit()
    return mv


def test_rebar_end_to_end(db_session):
    """
    GIVEN "Rebar" (kg)
    - entrée 100 -> 100
    - sortie 30  -> 70
    - sortie 100 -> refusée, le stock reste à 70
    """
    material_id = get_or_create_material(db_session, "Rebar", "kg")
    db_session.commit()

    _record(db_session, "Rebar", 100, "incoming", unit="kg")
    assert current_stock(db_session, material_id) == 100

    _record(db_session, "Rebar", 30, "outgoing", unit="kg")
    assert current_stock(db_session, material_id) == 70

    with pytest.raises(InsufficientStockError) as excinfo:
        record_movement(db_session, material_name="Rebar", quantity=100, movement_type="outgoing", unit="kg")
    db_session.rollback()

    message = str(excinfo.value)
    assert "Rebar" in message
    assert "70.00" in message
    assert "100.00" in message
    assert "kg" in message
    assert excinfo.value.current_stock == 70
    assert excinfo.value.requested == 100

    assert current_stock(db_session, material_id) == 70
    assert _movement_count(db_session) == 2


def test_quantity_sign_follows_type(db_session):
    incoming = _record(db_session, "Cement", 12.5, MovementType.incoming)
    outgoing = _record(db_session, "Cement", 2.5, MovementType.outgoing)

    assert incoming.quantity == 12.5
    assert incoming.type == MovementType.incoming
    assert outgoing.quantity == -2.5
    assert outgoing.type == MovementType.outgoing


def test_outgoing_of_exact_stock_is_allowed(db_session):
    material_id = _record(db_session, "Sand", 40, "incoming").material_id
    _record(db_session, "Sand", 40, "outgoing")
    assert current_stock(db_session, material_id) == 0


def test_outgoing_on_unknown_material_creates_it_but_records_nothing(db_session):
    with pytest.raises(InsufficientStockError) as excinfo:
        record_movement(db_session, material_name="Glass", quantity=1, movement_type="outgoing")
    assert "0.00" in str(excinfo.value)
    db_session.rollback()
    assert _movement_count(db_session) == 0


@pytest.mark.parametrize("qty", [0, -5, math.nan, math.inf, -math.inf, "10", None, True])
def test_invalid_quantity_rejected_before_storage(db_session, qty):
    with pytest.raises(ValidationError):
        record_movement(db_session, material_name="Cement", quantity=qty, movement_type="incoming")
    # rien n'a été créé, même pas le matériau
    assert db_session.execute(select(StockMovement)).first() is None
    assert not db_session.new


def test_unknown_type_rejected(db_session):
    with pytest.raises(ValidationError):
        record_movement(db_session, material_name="Cement", quantity=1, movement_type="transfer")
    assert _movement_count(db_session) == 0


def test_movement_on_inactive_material_is_refused(db_session):
    material_id = get_or_create_material(db_session, "Asbestos", "kg")
    deactivate_material(db_session, material_id)
    db_session.commit()

    with pytest.raises(NotFoundError):
        record_movement(db_session, material_name="asbestos", quantity=1, movement_type="incoming")


def test_unknown_user_is_refused(db_session):
    with pytest.raises(NotFoundError):
        record_movement(db_session, material_name="Cement", quantity=1, movement_type="incoming", user_id=42)


def test_locking_mode_gives_same_result(db_session):
    settings = Settings(database_url="sqlite+pysqlite://", stock_check_mode="locking")
    material_id = _record(db_session, "Rebar", 10, "incoming", settings=settings).material_id

    _record(db_session, "Rebar", 4, "outgoing", settings=settings)
    with pytest.raises(InsufficientStockError):
        record_movement(db_session, material_name="Rebar", quantity=7, movement_type="outgoing", settings=settings)
    db_session.rollback()

    assert current_stock(db_session, material_id) == 6


def test_invalid_stock_check_mode():
    with pytest.raises(ValueError):
        Settings(stock_check_mode="pessimistic")


def test_check_sufficiency(db_session):
    material_id = _record(db_session, "Tile", 5, "incoming").material_id

    ok = check_sufficiency(db_session, material_id, 5)
    assert ok.sufficient is True
    assert ok.current_stock == 5

    ko = check_sufficiency(db_session, material_id, 5.01, lock=True)
    assert ko.sufficient is False
    assert ko.current_stock == 5


def test_current_stock_is_zero_without_movements(db_session):
    material_id = get_or_create_material(db_session, "Tile", "m2")
    assert current_stock(db_session, material_id) == 0


def test_list_movements_enriched_most_recent_first(db_session):
    user = User(name="Ana", email="ana@example.com")
    db_session.add(user)
    db_session.commit()

    first = _record(db_session, "Cement", 10, "incoming", unit="kg", location="A1", message="delivery")
    second = _record(db_session, "Cement", 3, "outgoing", user_id=user.id)

    rows = list_movements(db_session)
    assert [r.id for r in rows] == [second.id, first.id]

    latest, oldest = rows
    assert latest.material == "Cement"
    assert latest.unit == "kg"
    assert latest.quantity == -3
    assert latest.type == MovementType.outgoing
    assert latest.user_name == "Ana"

    assert oldest.user_name == "system"
    assert oldest.location == "A1"
    assert oldest.message == "delivery"


def test_list_movements_limit(db_session):
    for _ in range(5):
        _record(db_session, "Cement", 1, "incoming")
    assert len(list_movements(db_session, limit=3)) == 3


def test_record_movement_defaults_to_environment_settings(db_session, monkeypatch):
    """
    Sans settings explicite, record_movement prend la config chargée
    depuis l'environnement (ici STOCK_CHECK_MODE=locking).
    """
    monkeypatch.setattr(
        config, "settings", Settings(database_url="sqlite+pysqlite://", stock_check_mode="locking")
    )
    seen = []

    def spy(db, material_id, qty, *, lock=False):
        seen.append(lock)
        return check_sufficiency(db, material_id, qty, lock=lock)

    monkeypatch.setattr(ledger, "check_sufficiency", spy)

    _record(db_session, "Rebar", 10, "incoming")
    _record(db_session, "Rebar", 4, "outgoing")

    assert seen == [True]
