import os
import pytest
from types import SimpleNamespace
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Token signing needs a key before the app modules are imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")

# Import basic dependencies
from app.db.database import Base, get_db, enable_sqlite_foreign_keys
from app.core.security import hash_password
from app.core.exception import register_exception_handlers
from app.core.constants import RegionLevel
from app.models.user import User
from app.models.region import Region
from app.models.polls import Poll, PollOption

# Test database - in-memory SQLite
TEST_DB_URL = "sqlite:///:memory:"

# Computed once; bcrypt is deliberately slow
TEST_PASSWORD = "testpass123"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session shared by services and endpoints"""
    # StaticPool keeps the single in-memory database alive across connections
    test_engine = enable_sqlite_foreign_keys(create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    ))

    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    # Create session
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = testing_session_local()

    try:
        yield session
    finally:
        session.close()
        test_engine.dispose()


def _make_user(db_session, username, email):
    user = User(username=username, email=email, hashed_password=TEST_PASSWORD_HASH)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    """Create a test user in database"""
    return _make_user(db_session, "testuser", "test@example.com")


@pytest.fixture
def test_user2(db_session):
    """Create a second test user in database"""
    return _make_user(db_session, "testuser2", "test2@example.com")


@pytest.fixture
def region_tree(db_session):
    """
    Korea
    ├── Seoul: Gangnam, Mapo
    └── Gyeonggi: Suwon
    """
    country = Region(name="Korea", level=RegionLevel.COUNTRY.value)
    db_session.add(country)
    db_session.flush()

    seoul = Region(name="Seoul", level=RegionLevel.PROVINCE.value, parent_id=country.id)
    gyeonggi = Region(name="Gyeonggi", level=RegionLevel.PROVINCE.value, parent_id=country.id)
    db_session.add_all([seoul, gyeonggi])
    db_session.flush()

    gangnam = Region(name="Gangnam", level=RegionLevel.CITY.value, parent_id=seoul.id)
    mapo = Region(name="Mapo", level=RegionLevel.CITY.value, parent_id=seoul.id)
    suwon = Region(name="Suwon", level=RegionLevel.CITY.value, parent_id=gyeonggi.id)
    db_session.add_all([gangnam, mapo, suwon])
    db_session.commit()

    return SimpleNamespace(
        country=country,
        seoul=seoul,
        gyeonggi=gyeonggi,
        gangnam=gangnam,
        mapo=mapo,
        suwon=suwon
    )


@pytest.fixture
def make_poll(db_session):
    """Factory inserting a poll with its options straight into the database"""

    def _make_poll(creator, region, question="Test question?", options=("Yes", "No"),
                   vote_counts=None, created_at=None):
        poll = Poll(question=question, creator_id=creator.id, region_id=region.id)
        if created_at is not None:
            poll.created_at = created_at
        counts = vote_counts or [0] * len(options)
        poll.options = [
            PollOption(text=text, vote_count=count) for text, count in zip(options, counts)
        ]
        db_session.add(poll)
        db_session.commit()
        db_session.refresh(poll)
        return poll

    return _make_poll


@pytest.fixture
def test_poll(make_poll, test_user, region_tree):
    """A two-option poll created by test_user in Gangnam"""
    return make_poll(test_user, region_tree.gangnam, question="Favorite Programming Language?",
                     options=("Python", "Rust"))


@pytest.fixture(scope="function")
def client(db_session):
    """Test client wired to the test session; endpoints see the same data as the test"""
    from app.api.v1.endpoints import auth, regions, users, polls, comments

    # Create fresh app instance for testing
    app = FastAPI(title="Test Regional Polls API", version="1.0.0")
    register_exception_handlers(app)
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(regions.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(polls.router, prefix="/api/v1")
    app.include_router(comments.router, prefix="/api/v1")

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    """Make every following request of ``client`` come from ``user`` (None for anonymous)"""
    from app.api.v1.endpoints.dependencies import get_current_user, get_current_user_optional

    def _login_as(user):
        overrides = client.app.dependency_overrides
        if user is None:
            overrides.pop(get_current_user, None)
            overrides[get_current_user_optional] = lambda: None
            return
        overrides[get_current_user] = lambda: user
        overrides[get_current_user_optional] = lambda: user

    return _login_as
