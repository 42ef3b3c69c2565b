"""Unit tests for kanban/db/sql_repository.py"""

import pytest
from conftest import make_user

from kanban.core.models import Board, Card, Column, User
from kanban.core.shared_types import SortDirection
from kanban.db.sql_repository import SQLUnitOfWork


def _board(owner: User, code: str = "code-1", title: str = "Sprint 1") -> Board:
    return Board(id=None, code=code, title=title, owner=owner, participants=[])


def _stored_board(uow: SQLUnitOfWork, owner: User, code: str = "code-1") -> Board:
    board = _board(owner, code=code)
    with uow.transaction():
        uow.boards.insert(board)
    return board


def _stored_column(uow: SQLUnitOfWork, board_id: int, title: str = "Todo") -> Column:
    column = Column(id=None, title=title, board_id=board_id)
    with uow.transaction():
        uow.columns.insert(column)
    return column


def _stored_card(uow: SQLUnitOfWork, column_id: int, title: str = "Fix bug") -> Card:
    card = Card(id=None, title=title, description="desc", color="#ff0000", column_id=column_id)
    with uow.transaction():
        uow.cards.insert(card)
    return card


# -- Generic CRUD --
def test_insert_then_get_user(uow: SQLUnitOfWork) -> None:
    user = make_user("alice")
    with uow.transaction():
        assert uow.users.insert(user)
    assert uow.users.get_by_primary_key("alice") == user


def test_get_unknown_user(uow: SQLUnitOfWork) -> None:
    """Should return None if the key does not match anything in database."""
    assert uow.users.get_by_primary_key("nobody") is None


def test_insert_duplicate_key_returns_false(uow: SQLUnitOfWork) -> None:
    """A collision is reported by the return value, and the transaction stays usable."""
    with uow.transaction():
        assert uow.users.insert(make_user("alice"))
        assert not uow.users.insert(make_user("alice"))
        assert uow.users.insert(make_user("bobby"))
    assert [u.login for u in uow.users.get_all()] == ["alice", "bobby"]


def test_insert_duplicate_email_returns_false(uow: SQLUnitOfWork) -> None:
    other = make_user("other")
    other.email = "alice@example.com"
    with uow.transaction():
        uow.users.insert(make_user("alice"))
        assert not uow.users.insert(other)
    assert uow.users.get_by_primary_key("other") is None


def test_insert_assigns_generated_id(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    first = _stored_board(uow, users["alice"], code="a")
    second = _stored_board(uow, users["alice"], code="b")
    assert first.id is not None and second.id is not None
    assert second.id > first.id


def test_update(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    board = _stored_board(uow, users["alice"])
    board.title = "Sprint 2"
    with uow.transaction():
        assert uow.boards.update(board)
    stored = uow.boards.get_by_primary_key(board.id)
    assert stored is not None
    assert stored.title == "Sprint 2"


def test_update_unknown_record(uow: SQLUnitOfWork) -> None:
    with uow.transaction():
        assert not uow.users.update(make_user("ghost"))


def test_delete_by_primary_key(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    with uow.transaction():
        assert uow.users.delete_by_primary_key("dave")
        assert not uow.users.delete_by_primary_key("dave")
    assert uow.users.get_by_primary_key("dave") is None


def test_get_many_and_one_by(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    assert uow.users.get_many_by("email", "bobby@example.com") == [users["bobby"]]
    assert uow.users.get_one_by("email", "carol@example.com") == users["carol"]
    assert uow.users.get_one_by("email", "nobody@example.com") is None


def test_unknown_column_name_is_rejected(uow: SQLUnitOfWork) -> None:
    with pytest.raises(ValueError):
        uow.users.get_many_by("password; DROP TABLE users", "x")
    with pytest.raises(ValueError):
        uow.boards.delete_all_memberships_where("card_id", 1)


def test_get_ordered_by(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    ascending = uow.users.get_ordered_by(["name", "surname"])
    assert [u.login for u in ascending] == ["alice", "bobby", "carol", "dave"]
    descending = uow.users.get_ordered_by(["login"], SortDirection.DESC)
    assert [u.login for u in descending] == ["dave", "carol", "bobby", "alice"]


def test_rollback_discards_writes(uow: SQLUnitOfWork) -> None:
    with pytest.raises(RuntimeError):
        with uow.transaction():
            uow.users.insert(make_user("alice"))
            raise RuntimeError("boom")
    assert uow.users.get_all() == []


# -- Boards --
def test_board_resolves_owner_and_participants(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    board = _stored_board(uow, users["alice"])
    with uow.transaction():
        assert uow.boards.add_participant("bobby", board.id)
        assert uow.boards.add_participant("carol", board.id)
        assert not uow.boards.add_participant("bobby", board.id)

    stored = uow.boards.get_by_code("code-1")
    assert stored is not None
    assert stored.owner == users["alice"]
    assert stored.participant_logins == ["bobby", "carol"]


def test_list_for_member(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    owned = _stored_board(uow, users["alice"], code="a")
    shared = _stored_board(uow, users["bobby"], code="b")
    _stored_board(uow, users["carol"], code="c")
    with uow.transaction():
        uow.boards.add_participant("alice", shared.id)

    assert [b.id for b in uow.boards.list_for_member("alice")] == [owned.id, shared.id]
    assert [b.id for b in uow.boards.list_owned_by("alice")] == [owned.id]
    assert uow.boards.count_participations("alice") == 1


def test_remove_assignments_in_board_only_touches_that_board(
    uow: SQLUnitOfWork, users: dict[str, User]
) -> None:
    first = _stored_board(uow, users["alice"], code="a")
    second = _stored_board(uow, users["alice"], code="b")
    card_in_first = _stored_card(uow, _stored_column(uow, first.id).id)
    card_in_second = _stored_card(uow, _stored_column(uow, second.id).id)
    with uow.transaction():
        uow.cards.add_assignment("bobby", card_in_first.id)
        uow.cards.add_assignment("bobby", card_in_second.id)
        uow.cards.add_assignment("carol", card_in_first.id)
        assert uow.boards.remove_assignments_in_board("bobby", first.id) == 1

    assert uow.cards.get_by_primary_key(card_in_first.id).assignee_logins == ["carol"]
    assert uow.cards.get_by_primary_key(card_in_second.id).assignee_logins == ["bobby"]


# -- Columns / cards --
def test_columns_listed_in_creation_order(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    board = _stored_board(uow, users["alice"])
    titles = ["Todo", "Doing", "Done"]
    for title in titles:
        _stored_column(uow, board.id, title)
    assert [c.title for c in uow.columns.list_for_board(board.id)] == titles


def test_card_keeps_column_reference_and_assignees(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    board = _stored_board(uow, users["alice"])
    column = _stored_column(uow, board.id)
    card = _stored_card(uow, column.id)
    with uow.transaction():
        uow.cards.add_assignment("bobby", card.id)
        uow.cards.add_assignment("alice", card.id)

    stored = uow.cards.get_by_primary_key(card.id)
    assert stored is not None
    assert stored.column_id == column.id
    assert stored.assignees == [users["alice"], users["bobby"]]
    assert [c.id for c in uow.cards.list_for_board(board.id)] == [card.id]
    assert [c.id for c in uow.cards.list_for_user("bobby")] == [card.id]
    assert uow.cards.count_assignments("bobby") == 1


def test_delete_all_links_where(uow: SQLUnitOfWork, users: dict[str, User]) -> None:
    board = _stored_board(uow, users["alice"])
    card = _stored_card(uow, _stored_column(uow, board.id).id)
    with uow.transaction():
        uow.boards.add_participant("bobby", board.id)
        uow.boards.add_participant("carol", board.id)
        uow.cards.add_assignment("bobby", card.id)
        assert uow.cards.delete_all_assignments_where("login", "bobby") == 1
        assert uow.boards.delete_all_memberships_where("board_id", board.id) == 2
    assert uow.boards.get_by_primary_key(board.id).participants == []
    assert uow.cards.get_by_primary_key(card.id).assignees == []
