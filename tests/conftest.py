from collections.abc import Callable, Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from shared.core.database import AuthBase, Base, get_auth_db, get_facility_db
from shared.models.users import Users
# Import the app so every table registers with Base metadata.
from occupancy_service.app.main import app
from occupancy_service.app.crud.space_sites import space_occupancy_crud as crud
from occupancy_service.app.models.space_sites.space_occupancies import OccupantType
from occupancy_service.app.models.space_sites.spaces import Space
from occupancy_service.app.schemas.space_sites.space_occupancy_schemas import MoveInRequest


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, db, event, payload):
        self.sent.append((event, payload))


class FailingNotifier:
    def notify(self, db, event, payload):
        raise RuntimeError("notification backend down")


@pytest.fixture
def engine(tmp_path):
    """A fresh SQLite database per test holding both facility and auth tables."""
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    AuthBase.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        AuthBase.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def create_space(db_session: Session) -> Callable[..., Space]:
    counter = {"value": 0}

    def _create(code: str = None) -> Space:
        counter["value"] += 1
        space = Space(code=code or f"A-{counter['value']:03d}",
                      name=f"Unit {counter['value']}")
        db_session.add(space)
        db_session.commit()
        return space

    return _create


@pytest.fixture
def create_user(db_session: Session) -> Callable[..., Users]:
    def _create(full_name: str = "Ravi Kumar") -> Users:
        user = Users(full_name=full_name, email="inspector@example.com")
        db_session.add(user)
        db_session.commit()
        return user

    return _create


@pytest.fixture
def occupied_space(db_session: Session, create_space) -> Space:
    space = create_space()
    crud.move_in(db_session, MoveInRequest(
        space_id=space.id,
        occupant_type=OccupantType.tenant,
        occupant_name="Asha Menon",
        reference_no="LEASE-001",
        move_in_date=date(2024, 1, 1),
    ))
    return space


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    def _override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_facility_db] = _override_db
    app.dependency_overrides[get_auth_db] = _override_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_facility_db, None)
        app.dependency_overrides.pop(get_auth_db, None)
