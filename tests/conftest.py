import os
import tempfile
from pathlib import Path

_tmpdir = Path(tempfile.mkdtemp(prefix="spotrate_test_"))
_db_path = _tmpdir / "test.db"

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_db_path.as_posix()}")
os.environ.setdefault("LOG_DIR", str(_tmpdir / "logs"))
os.environ.setdefault("MUTATION_RETRY_ATTEMPTS", "2")

import pytest
from fastapi.testclient import TestClient

from spotrate.db.base import Base
from spotrate.db.session import SessionLocal, engine
from spotrate.main import create_app
from spotrate.models.spots import Spot
from spotrate.models.users import User
from spotrate.repositories.unit_of_work import SqlUnitOfWork


@pytest.fixture()
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(clean_db):
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def uow(clean_db):
    session = SessionLocal()
    try:
        yield SqlUnitOfWork(session)
    finally:
        session.close()


@pytest.fixture()
def client(clean_db):
    app = create_app()
    with TestClient(app) as c:
        yield c


def seed_spot(db, spot_id="spot-1", name="Quiet Cafe") -> str:
    db.add(Spot(id=spot_id, name=name, category="cafe"))
    db.commit()
    return spot_id


def seed_users(db, *user_ids: str) -> list[str]:
    db.add_all([User(id=u) for u in user_ids])
    db.commit()
    return list(user_ids)


def user_header(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}
