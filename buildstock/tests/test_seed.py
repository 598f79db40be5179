from sqlalchemy import inspect, select

from buildstock.app.db.models.models_v1 import User
from buildstock.app.db.seed import init_db
from buildstock.app.db.verify import run_verify
from buildstock.services.users import SYSTEM_USER_EMAIL, get_active_user


def test_init_db_is_repeatable(engine, db_session):
    init_db(engine)
    init_db(engine)

    users = db_session.execute(select(User).where(User.email == SYSTEM_USER_EMAIL)).scalars().all()
    assert len(users) == 1
    assert get_active_user(db_session, users[0].id).role.value == "admin"

    tables = set(inspect(engine).get_table_names())
    assert {"users", "materials", "stock_movements"} <= tables

    indexes = {ix["name"] for ix in inspect(engine).get_indexes("stock_movements")}
    assert {"ix_stock_movements_material_id", "ix_stock_movements_type", "ix_stock_movements_timestamp_desc"} <= indexes


def test_verify_report_lists_inactive_users(engine, db_session, capsys):
    db_session.add_all(
        [
            User(name="Ana", email="ana@example.com"),
            User(name="Bruno", email="bruno@example.com", active=False),
        ]
    )
    db_session.commit()
    db_session.close()

    run_verify(bind=engine)

    out = capsys.readouterr().out
    lines = {line.split("|")[1].strip(): line for line in out.splitlines() if "@example.com" in line}
    assert set(lines) == {"Ana", "Bruno"}
    assert lines["Ana"].rstrip().endswith("yes")
    assert lines["Bruno"].rstrip().endswith("no")
