"""Protocol repositories: what the service layer needs from persistence (SQLAlchemy in sql_repository.py, dicts in tests...)"""

from contextlib import AbstractContextManager
from typing import Any, Optional, Protocol, Sequence, TypeVar

from kanban.core.models import Board, Card, Column, Login, User
from kanban.core.shared_types import SortDirection

EntityT = TypeVar("EntityT")
KeyT = TypeVar("KeyT", contravariant=True)


class Repository(Protocol[EntityT, KeyT]):
    """Generic entity <-> row mapping."""

    def get_all(self) -> list[EntityT]: ...

    def get_by_primary_key(self, key: KeyT) -> Optional[EntityT]: ...

    def get_many_by(self, column: str, value: Any) -> list[EntityT]: ...

    def get_one_by(self, column: str, value: Any) -> Optional[EntityT]: ...

    def get_ordered_by(
        self, columns: Sequence[str], direction: SortDirection = SortDirection.ASC
    ) -> list[EntityT]: ...

    def insert(self, entity: EntityT) -> bool:
        """Store a new record. False (not an exception) if it collides with an existing key / unique value."""
        ...

    def update(self, entity: EntityT) -> bool:
        """Overwrite the stored record. False if there is none."""
        ...

    def delete_by_primary_key(self, key: KeyT) -> bool: ...

    def delete_all_assignments_where(self, column: str, value: Any) -> int:
        """Remove every user <-> card link matching column == value. Returns the number removed."""
        ...

    def delete_all_memberships_where(self, column: str, value: Any) -> int:
        """Remove every user <-> board link matching column == value. Returns the number removed."""
        ...


class UserRepository(Repository[User, Login], Protocol):
    def get_by_email(self, email: str) -> list[User]: ...


class BoardRepository(Repository[Board, int], Protocol):
    def get_by_code(self, code: str) -> Optional[Board]: ...

    def list_for_member(self, login: Login) -> list[Board]:
        """Boards owned by or shared with the user."""
        ...

    def list_owned_by(self, login: Login) -> list[Board]: ...

    def add_participant(self, login: Login, board_id: int) -> bool: ...

    def remove_participant(self, login: Login, board_id: int) -> bool: ...

    def remove_assignments_in_board(self, login: Login, board_id: int) -> int:
        """Unassign the user from every card of the board."""
        ...

    def count_participations(self, login: Login) -> int: ...


class ColumnRepository(Repository[Column, int], Protocol):
    def list_for_board(self, board_id: int) -> list[Column]:
        """Columns of a board, in creation (= display) order."""
        ...


class CardRepository(Repository[Card, int], Protocol):
    def list_for_column(self, column_id: int) -> list[Card]: ...

    def list_for_board(self, board_id: int) -> list[Card]: ...

    def list_for_user(self, login: Login) -> list[Card]: ...

    def add_assignment(self, login: Login, card_id: int) -> bool: ...

    def count_assignments(self, login: Login) -> int: ...


class UnitOfWork(Protocol):
    """Repositories sharing one storage transaction."""

    users: UserRepository
    boards: BoardRepository
    columns: ColumnRepository
    cards: CardRepository

    def transaction(self) -> AbstractContextManager[None]:
        """Commit everything written inside the block, or nothing if it raises."""
        ...
