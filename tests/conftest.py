"""
Shared pytest fixtures: an in-memory SQLite database with the intake schema.
"""
import os

# Never touch the on-disk database from tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.auth import hash_password
from core.database import Base
from core.setup_db import seed_catalogs
from models import Program, User
from services.intake_flow import IntakeFlow, IntakeState


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Same shape as core.database.get_db_context, bound to the test engine."""
    Session = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    @contextmanager
    def factory():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    return factory


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def seeded_db(db):
    """Programs, clinics and providers from core.setup_db."""
    seed_catalogs(db)
    return db


@pytest.fixture
def user(db):
    u = User(username="patient_a", password_hash=hash_password("secret"), full_name="Patient A")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def other_user(db):
    u = User(username="patient_b", password_hash=hash_password("secret"))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def program(seeded_db):
    return seeded_db.query(Program).order_by(Program.name).first()


@pytest.fixture
def flow(seeded_db, session_factory, user):
    """IntakeFlow for a freshly logged-in user; portal calls are recorded."""
    opened = []
    flow = IntakeFlow(IntakeState(user_id=user.id), session_factory=session_factory, portal=opened.append)
    flow.opened_urls = opened
    return flow
