"""
Cascading deletion.

Storage enforces no cascade, so removing a parent row first removes everything pointing at it:
link rows (assignment, membership) before the rows they link, children before parents.
Callers run these inside a unit-of-work transaction so a failure midway leaves nothing half-deleted.
"""

import logging
from collections import Counter

from kanban.core.models import Login
from kanban.db.repository import UnitOfWork

logger = logging.getLogger(__name__)


class CascadeDeleter:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow
        self.removed: Counter[str] = Counter()

    def delete_card(self, card_id: int) -> None:
        self.removed["assignment"] += self.uow.cards.delete_all_assignments_where("card_id", card_id)
        if self.uow.cards.delete_by_primary_key(card_id):
            self.removed["card"] += 1

    def delete_column(self, column_id: int) -> None:
        for card in self.uow.cards.list_for_column(column_id):
            assert card.id is not None
            self.delete_card(card.id)
        if self.uow.columns.delete_by_primary_key(column_id):
            self.removed["column"] += 1

    def delete_board(self, board_id: int) -> None:
        self.removed["membership"] += self.uow.boards.delete_all_memberships_where("board_id", board_id)
        for column in self.uow.columns.list_for_board(board_id):
            assert column.id is not None
            self.delete_column(column.id)
        if self.uow.boards.delete_by_primary_key(board_id):
            self.removed["board"] += 1
        logger.info("Board %s deleted, removed rows: %s", board_id, dict(self.removed))

    def delete_user(self, login: Login) -> None:
        self.removed["assignment"] += self.uow.users.delete_all_assignments_where("login", login)
        self.removed["membership"] += self.uow.users.delete_all_memberships_where("login", login)
        for board in self.uow.boards.list_owned_by(login):
            assert board.id is not None
            self.delete_board(board.id)
        if self.uow.users.delete_by_primary_key(login):
            self.removed["user"] += 1
        logger.info("User %r deleted, removed rows: %s", login, dict(self.removed))
