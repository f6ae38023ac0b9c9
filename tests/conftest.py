from __future__ import annotations

from dataclasses import dataclass

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from timeless.database.db import build_engine
from timeless.models import Base, Track, User, UserRole


@dataclass
class Parties:
    artist_id: str
    exec_id: str
    rep_id: str
    outsider_id: str
    admin_id: str
    track_id: str


class RecordingNotifier:
    """Keeps every published snapshot so tests can assert on broadcasts."""

    def __init__(self) -> None:
        self.published = []

    async def init(self) -> None:
        return None

    async def teardown(self) -> None:
        return None

    def publish(self, deal) -> None:
        self.published.append(deal)


def _seed_parties(session) -> Parties:
    def _user(email: str, role: UserRole) -> User:
        user = User(email=email, full_name=email.split("@")[0], hashed_password="not-a-real-hash", role=role)
        session.add(user)
        return user

    artist = _user("artist@example.com", UserRole.ARTIST)
    executive = _user("exec@example.com", UserRole.EXEC)
    rep = _user("rep@example.com", UserRole.REP)
    outsider = _user("outsider@example.com", UserRole.EXEC)
    admin = _user("admin@example.com", UserRole.ADMIN)
    session.flush()

    track = Track(title="Night Swim", artist_id=artist.id)
    session.add(track)
    session.flush()
    parties = Parties(
        artist_id=artist.id,
        exec_id=executive.id,
        rep_id=rep.id,
        outsider_id=outsider.id,
        admin_id=admin.id,
        track_id=track.id,
    )
    session.commit()
    return parties


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def parties(session) -> Parties:
    return _seed_parties(session)


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a shared on-disk database, for tests that need two writers."""
    engine = build_engine(f"sqlite:///{tmp_path / 'timeless_test.db'}")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def file_parties(file_session_factory) -> Parties:
    db = file_session_factory()
    try:
        return _seed_parties(db)
    finally:
        db.close()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def deferred_session_factory(tmp_path):
    """Plain SQLite sessions; reads take no lock, so another writer can commit in between."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'timeless_deferred.db'}",
        connect_args={"check_same_thread": False},
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def deferred_parties(deferred_session_factory) -> Parties:
    db = deferred_session_factory()
    try:
        return _seed_parties(db)
    finally:
        db.close()
