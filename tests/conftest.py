"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Iterator

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import Session

from kanban.auth.passwords import BcryptPasswordHasher
from kanban.core.context import RequestContext
from kanban.core.models import User
from kanban.db.database import build_engine, session_factory
from kanban.db.schema import Base
from kanban.db.sql_repository import SQLUnitOfWork
from kanban.services.board_service import BoardService
from kanban.services.card_service import CardService
from kanban.services.column_service import ColumnService
from kanban.services.user_service import UserService

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = build_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = session_factory(engine)

PASSWORD = "Password1"


@pytest.fixture
def db_session() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to keep tests independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def uow(db_session: Session) -> SQLUnitOfWork:
    return SQLUnitOfWork(db_session)


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    """Lowest bcrypt cost: hashing is not what is under test."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def board_service(uow: SQLUnitOfWork, hasher: BcryptPasswordHasher) -> BoardService:
    return BoardService(uow, hasher)


@pytest.fixture
def column_service(uow: SQLUnitOfWork, board_service: BoardService) -> ColumnService:
    return ColumnService(uow, board_service)


@pytest.fixture
def card_service(
    uow: SQLUnitOfWork, column_service: ColumnService, board_service: BoardService
) -> CardService:
    return CardService(uow, column_service, board_service)


@pytest.fixture
def user_service(uow: SQLUnitOfWork, hasher: BcryptPasswordHasher) -> UserService:
    return UserService(uow, hasher)


def make_user(login: str) -> User:
    return User(
        login=login,
        name=login.capitalize(),
        surname="Tester",
        email=f"{login}@example.com",
        password_hash="not-a-real-hash",
    )


@pytest.fixture
def users(uow: SQLUnitOfWork) -> dict[str, User]:
    """alice, bobby, carol and dave stored directly through the repository."""
    stored = {}
    with uow.transaction():
        for login in ("alice", "bobby", "carol", "dave"):
            user = make_user(login)
            uow.users.insert(user)
            stored[login] = user
    return stored


def ctx(login: str) -> RequestContext:
    return RequestContext(actor_login=login)
