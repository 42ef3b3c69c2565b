"""Card operations. Cards stay within the board of their column, and only board members can hold them."""

import logging
from typing import Iterable, Optional

from kanban.core.authorization import require_member
from kanban.core.context import RequestContext
from kanban.core.exceptions import BadRequestError, ConflictError, NotFoundError
from kanban.core.models import Board, Card, Login, User
from kanban.db.repository import UnitOfWork
from kanban.services.board_service import BoardService
from kanban.services.cascade import CascadeDeleter
from kanban.services.column_service import ColumnService
from kanban.services.validation import (
    check_color,
    check_description,
    check_identifier,
    check_title,
)

logger = logging.getLogger(__name__)


class CardService:
    def __init__(
        self,
        uow: UnitOfWork,
        column_service: ColumnService,
        board_service: BoardService,
    ) -> None:
        self.uow = uow
        self.column_service = column_service
        self.board_service = board_service

    # -- Lookups --
    def get_card(self, card_id: Optional[int]) -> Card:
        check_identifier(card_id, "card id")
        card = self.uow.cards.get_by_primary_key(card_id)
        if card is None:
            raise NotFoundError(f"Card {card_id} not found.")
        return card

    def list_cards_for_column(self, column_id: Optional[int]) -> list[Card]:
        column = self.column_service.get_column(column_id)
        assert column.id is not None
        return self.uow.cards.list_for_column(column.id)

    def list_cards_for_user(self, login: Login) -> list[Card]:
        return self.uow.cards.list_for_user(login)

    # -- Mutations --
    def create_card(
        self,
        ctx: RequestContext,
        column_id: Optional[int],
        title: Optional[str],
        description: Optional[str],
        color: Optional[str],
        assignees: Optional[Iterable[Login]] = None,
    ) -> Card:
        """New card in the column, assigned to the given members of the board."""
        self._check_fields(title, description, color)
        check_identifier(column_id, "column id")

        column = self.column_service.get_column(column_id)
        board = self.column_service.board_of(column)
        require_member(ctx, board, "create a card")
        logins = self._check_assignees(assignees, board)
        assert column.id is not None

        card = Card(
            id=None,
            title=title,  # type: ignore[arg-type]
            description=description,  # type: ignore[arg-type]
            color=color,  # type: ignore[arg-type]
            column_id=column.id,
            assignees=self._users(logins, board),
        )
        with self.uow.transaction():
            if not self.uow.cards.insert(card):
                raise ConflictError("Could not store the card, please retry.")
            for login in logins:
                if not self.uow.cards.add_assignment(login, card.id):  # type: ignore[arg-type]
                    raise ConflictError(f"{login!r} is already assigned to this card.")
        logger.info("Card %s created in column %s by %r", card.id, column.id, ctx.actor_login)
        return card

    def update_card(
        self,
        ctx: RequestContext,
        card_id: Optional[int],
        column_id: Optional[int],
        title: Optional[str],
        description: Optional[str],
        color: Optional[str],
        assignees: Optional[Iterable[Login]] = None,
    ) -> Card:
        """Edit a card, possibly moving it to another column of the same board. The assignee set is replaced."""
        check_identifier(card_id, "card id")
        check_identifier(column_id, "column id")
        self._check_fields(title, description, color)

        card = self.get_card(card_id)
        new_column = self.column_service.get_column(column_id)
        old_column = self.column_service.get_column(card.column_id)
        if new_column.board_id != old_column.board_id:
            raise BadRequestError("A card cannot be moved to a column of another board.")

        board = self.column_service.board_of(new_column)
        require_member(ctx, board, "edit a card")
        logins = self._check_assignees(assignees, board)
        assert card.id is not None and new_column.id is not None

        card.title = title  # type: ignore[assignment]
        card.description = description  # type: ignore[assignment]
        card.color = color  # type: ignore[assignment]
        card.column_id = new_column.id
        card.assignees = self._users(logins, board)
        with self.uow.transaction():
            self.uow.cards.update(card)
            self.uow.cards.delete_all_assignments_where("card_id", card.id)
            for login in logins:
                if not self.uow.cards.add_assignment(login, card.id):
                    raise ConflictError(f"{login!r} is already assigned to this card.")
        return card

    def delete_card(self, ctx: RequestContext, card_id: Optional[int]) -> Board:
        """Remove the card and its assignments. Returns the board it belonged to."""
        card = self.get_card(card_id)
        column = self.column_service.get_column(card.column_id)
        board = self.column_service.board_of(column)
        require_member(ctx, board, "delete a card")
        assert card.id is not None

        with self.uow.transaction():
            CascadeDeleter(self.uow).delete_card(card.id)
        logger.info("Card %s deleted by %r", card.id, ctx.actor_login)
        return board

    # -- Internal helpers --
    @staticmethod
    def _check_fields(
        title: Optional[str], description: Optional[str], color: Optional[str]
    ) -> None:
        check_title(title, "card")
        check_description(description)
        check_color(color)

    @staticmethod
    def _check_assignees(assignees: Optional[Iterable[Login]], board: Board) -> list[Login]:
        """Deduplicated logins, all of them owner or participant of the board."""
        logins = list(dict.fromkeys(assignees or []))
        for login in logins:
            if not board.is_member(login):
                raise BadRequestError(
                    "One of the members is not affiliated with the board or does not exist."
                )
        return logins

    @staticmethod
    def _users(logins: list[Login], board: Board) -> list[User]:
        members = {board.owner.login: board.owner, **{p.login: p for p in board.participants}}
        return sorted((members[login] for login in logins), key=lambda u: u.login)
