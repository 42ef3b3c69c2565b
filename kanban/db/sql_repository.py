"""Implementation of the repositories using SQLAlchemy"""

import logging
from contextlib import contextmanager
from typing import Any, ClassVar, Generic, Iterator, Optional, Sequence, TypeVar

from sqlalchemy import ColumnElement, Table, delete, func, insert, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kanban.core.models import Board, Card, Column, Login, User
from kanban.core.shared_types import SortDirection
from kanban.db.schema import (
    Base,
    DBBoard,
    DBCard,
    DBColumn,
    DBUser,
    assignment,
    membership,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")
RowT = TypeVar("RowT", bound=Base)


class SQLRepository(Generic[EntityT, RowT]):
    """
    Generic CRUD on one table.

    Subclasses declare the table explicitly: mapped row class, primary key, persisted columns (in order),
    whether the key is generated by the database, and the two mapping functions row -> entity / entity -> values.
    """

    model: ClassVar[type[Base]]
    primary_key: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    auto_increment: ClassVar[bool] = False

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    # -- Generic reads --
    def get_all(self) -> list[EntityT]:
        return self._select_entities(select(self.model))

    def get_by_primary_key(self, key: Any) -> Optional[EntityT]:
        row = self._fetch_row(key)
        if row is None:
            return None
        return self._to_entity(row)

    def get_many_by(self, column: str, value: Any) -> list[EntityT]:
        query = select(self.model).where(self._column(column) == value)
        return self._select_entities(query)

    def get_one_by(self, column: str, value: Any) -> Optional[EntityT]:
        query = select(self.model).where(self._column(column) == value).limit(1)
        row = self.db.scalar(query)
        if row is None:
            return None
        return self._to_entity(row)

    def get_ordered_by(
        self, columns: Sequence[str], direction: SortDirection = SortDirection.ASC
    ) -> list[EntityT]:
        query = select(self.model).order_by(*self._ordering(columns, direction))
        return self._select_entities(query)

    # -- Generic writes --
    def insert(self, entity: EntityT) -> bool:
        """Add a record. Unique / key collisions roll back to a savepoint and return False."""
        values = self._to_values(entity)
        if self.auto_increment:
            values.pop(self.primary_key, None)
        elif self._fetch_row(values[self.primary_key]) is not None:
            logger.debug("Insert into %s refused: key already present", self._table.name)
            return False
        row = self.model(**values)
        try:
            with self.db.begin_nested():
                self.db.add(row)
                self.db.flush()
        except IntegrityError as exc:
            logger.debug("Insert into %s refused: %s", self._table.name, exc.orig)
            return False
        if self.auto_increment:
            setattr(entity, self.primary_key, getattr(row, self.primary_key))
        return True

    def update(self, entity: EntityT) -> bool:
        values = self._to_values(entity)
        row = self._fetch_row(values[self.primary_key])
        if row is None:
            return False
        for name, value in values.items():
            if name != self.primary_key:
                setattr(row, name, value)
        self.db.flush()
        return True

    def delete_by_primary_key(self, key: Any) -> bool:
        row = self._fetch_row(key)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True

    # -- Link tables (used by the cascade) --
    def delete_all_assignments_where(self, column: str, value: Any) -> int:
        return self._delete_links(assignment, column, value)

    def delete_all_memberships_where(self, column: str, value: Any) -> int:
        return self._delete_links(membership, column, value)

    # -- Internal helpers --
    @property
    def _table(self) -> Table:
        return self.model.__table__  # type: ignore[return-value]

    def _column(self, name: str) -> ColumnElement[Any]:
        if name not in self.columns:
            raise ValueError(f"{name!r} is not a column of table {self._table.name!r}.")
        return self._table.c[name]

    def _ordering(
        self, columns: Sequence[str], direction: SortDirection
    ) -> list[ColumnElement[Any]]:
        if direction == SortDirection.DESC:
            return [self._column(c).desc() for c in columns]
        return [self._column(c).asc() for c in columns]

    def _fetch_row(self, key: Any) -> Optional[Any]:
        query = select(self.model).where(self._column(self.primary_key) == key)
        return self.db.scalar(query)

    def _select_entities(self, query: Any) -> list[EntityT]:
        return [self._to_entity(row) for row in self.db.scalars(query)]

    def _delete_links(self, link_table: Table, column: str, value: Any) -> int:
        if column not in link_table.c:
            raise ValueError(f"{column!r} is not a column of table {link_table.name!r}.")
        result = self.db.execute(delete(link_table).where(link_table.c[column] == value))
        return result.rowcount  # type: ignore[attr-defined]

    def _insert_link(self, link_table: Table, **values: Any) -> bool:
        try:
            with self.db.begin_nested():
                self.db.execute(insert(link_table).values(**values))
        except IntegrityError as exc:
            logger.debug("Insert into %s refused: %s", link_table.name, exc.orig)
            return False
        return True

    def _users_linked_by(self, link_table: Table, column: str, value: Any) -> list[User]:
        """Users joined to the record through a link table."""
        query = (
            select(DBUser)
            .join(link_table, link_table.c.login == DBUser.login)
            .where(link_table.c[column] == value)
            .order_by(DBUser.login)
        )
        return [_user_from_row(row) for row in self.db.scalars(query)]

    def _to_entity(self, row: Any) -> EntityT:
        raise NotImplementedError

    def _to_values(self, entity: EntityT) -> dict[str, Any]:
        raise NotImplementedError


def _user_from_row(row: DBUser) -> User:
    return User(
        login=row.login,
        name=row.name,
        surname=row.surname,
        email=row.email,
        password_hash=row.password_hash,
    )


class SQLUserRepository(SQLRepository[User, DBUser]):
    model = DBUser
    primary_key = "login"
    columns = ("login", "name", "surname", "email", "password_hash")
    auto_increment = False

    def get_by_email(self, email: str) -> list[User]:
        return self.get_many_by("email", email)

    def _to_entity(self, row: DBUser) -> User:
        return _user_from_row(row)

    def _to_values(self, entity: User) -> dict[str, Any]:
        return {
            "login": entity.login,
            "name": entity.name,
            "surname": entity.surname,
            "email": entity.email,
            "password_hash": entity.password_hash,
        }


class SQLBoardRepository(SQLRepository[Board, DBBoard]):
    model = DBBoard
    primary_key = "id"
    columns = ("id", "code", "title", "owner_login")
    auto_increment = True

    def get_by_code(self, code: str) -> Optional[Board]:
        return self.get_one_by("code", code)

    def list_for_member(self, login: Login) -> list[Board]:
        query = (
            select(DBBoard)
            .outerjoin(membership, membership.c.board_id == DBBoard.id)
            .where(or_(membership.c.login == login, DBBoard.owner_login == login))
            .distinct()
            .order_by(DBBoard.id)
        )
        return self._select_entities(query)

    def list_owned_by(self, login: Login) -> list[Board]:
        query = select(DBBoard).where(DBBoard.owner_login == login).order_by(DBBoard.id)
        return self._select_entities(query)

    def add_participant(self, login: Login, board_id: int) -> bool:
        return self._insert_link(membership, login=login, board_id=board_id)

    def remove_participant(self, login: Login, board_id: int) -> bool:
        result = self.db.execute(
            delete(membership).where(
                membership.c.login == login, membership.c.board_id == board_id
            )
        )
        return result.rowcount > 0  # type: ignore[attr-defined]

    def remove_assignments_in_board(self, login: Login, board_id: int) -> int:
        cards_of_board = (
            select(DBCard.id)
            .join(DBColumn, DBColumn.id == DBCard.column_id)
            .where(DBColumn.board_id == board_id)
        )
        result = self.db.execute(
            delete(assignment).where(
                assignment.c.login == login, assignment.c.card_id.in_(cards_of_board)
            )
        )
        return result.rowcount  # type: ignore[attr-defined]

    def count_participations(self, login: Login) -> int:
        query = select(func.count()).select_from(membership).where(membership.c.login == login)
        return self.db.scalar(query) or 0

    def _to_entity(self, row: DBBoard) -> Board:
        owner_row = self.db.get(DBUser, row.owner_login)
        if owner_row is None:
            raise ValueError(f"Board {row.id} references unknown owner {row.owner_login!r}.")
        return Board(
            id=row.id,
            code=row.code,
            title=row.title,
            owner=_user_from_row(owner_row),
            participants=self._users_linked_by(membership, "board_id", row.id),
        )

    def _to_values(self, entity: Board) -> dict[str, Any]:
        return {
            "id": entity.id,
            "code": entity.code,
            "title": entity.title,
            "owner_login": entity.owner.login,
        }


class SQLColumnRepository(SQLRepository[Column, DBColumn]):
    model = DBColumn
    primary_key = "id"
    columns = ("id", "title", "board_id")
    auto_increment = True

    def list_for_board(self, board_id: int) -> list[Column]:
        query = select(DBColumn).where(DBColumn.board_id == board_id).order_by(DBColumn.id)
        return self._select_entities(query)

    def _to_entity(self, row: DBColumn) -> Column:
        # Board kept as a reference (id only).
        return Column(id=row.id, title=row.title, board_id=row.board_id)

    def _to_values(self, entity: Column) -> dict[str, Any]:
        return {"id": entity.id, "title": entity.title, "board_id": entity.board_id}


class SQLCardRepository(SQLRepository[Card, DBCard]):
    model = DBCard
    primary_key = "id"
    columns = ("id", "title", "description", "color", "column_id")
    auto_increment = True

    def list_for_column(self, column_id: int) -> list[Card]:
        query = select(DBCard).where(DBCard.column_id == column_id).order_by(DBCard.id)
        return self._select_entities(query)

    def list_for_board(self, board_id: int) -> list[Card]:
        query = (
            select(DBCard)
            .join(DBColumn, DBColumn.id == DBCard.column_id)
            .where(DBColumn.board_id == board_id)
            .order_by(DBCard.id)
        )
        return self._select_entities(query)

    def list_for_user(self, login: Login) -> list[Card]:
        query = (
            select(DBCard)
            .join(assignment, assignment.c.card_id == DBCard.id)
            .where(assignment.c.login == login)
            .order_by(DBCard.id)
        )
        return self._select_entities(query)

    def add_assignment(self, login: Login, card_id: int) -> bool:
        return self._insert_link(assignment, login=login, card_id=card_id)

    def count_assignments(self, login: Login) -> int:
        query = select(func.count()).select_from(assignment).where(assignment.c.login == login)
        return self.db.scalar(query) or 0

    def _to_entity(self, row: DBCard) -> Card:
        # Column kept as a reference (id only) to avoid hydrating column -> board -> users for every card.
        return Card(
            id=row.id,
            title=row.title,
            description=row.description,
            color=row.color,
            column_id=row.column_id,
            assignees=self._users_linked_by(assignment, "card_id", row.id),
        )

    def _to_values(self, entity: Card) -> dict[str, Any]:
        return {
            "id": entity.id,
            "title": entity.title,
            "description": entity.description,
            "color": entity.color,
            "column_id": entity.column_id,
        }


class SQLUnitOfWork:
    """The four repositories bound to one session. Writes are committed by transaction()."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session
        self.users = SQLUserRepository(db_session)
        self.boards = SQLBoardRepository(db_session)
        self.columns = SQLColumnRepository(db_session)
        self.cards = SQLCardRepository(db_session)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
