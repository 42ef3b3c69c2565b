"""Board operations: creation, renaming, membership management, deletion and lookups."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from kanban.auth.passwords import PasswordHasher
from kanban.core.authorization import require_member, require_owner
from kanban.core.context import RequestContext
from kanban.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from kanban.core.models import Board, Card, Column, Login, User
from kanban.db.repository import UnitOfWork
from kanban.services.cascade import CascadeDeleter
from kanban.services.validation import check_identifier, check_login, check_title

logger = logging.getLogger(__name__)

BOARD_CODE_LENGTH = 64


@dataclass
class AssignmentSummary:
    """How many cards of a board a user holds, per column id."""

    user: User
    cards_per_column: dict[int, int] = field(default_factory=dict)


class BoardService:
    """Orchestration of board operations."""

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self.uow = uow
        self.hasher = hasher

    # -- Lookups --
    def get_board_by_id(self, board_id: Optional[int]) -> Board:
        check_identifier(board_id, "board id")
        board = self.uow.boards.get_by_primary_key(board_id)
        if board is None:
            raise NotFoundError(f"Board {board_id} not found.")
        return board

    def get_board_by_code(self, code: Optional[str]) -> Board:
        if not code:
            raise BadRequestError("The board code is missing.")
        board = self.uow.boards.get_by_code(code)
        if board is None:
            raise NotFoundError("No board matches this code.")
        return board

    def list_boards_for_user(self, login: Optional[str]) -> list[Board]:
        check_login(login)
        assert login is not None
        return self.uow.boards.list_for_member(login)

    def check_member(self, ctx: RequestContext, board_id: Optional[int]) -> Board:
        """Board, if the actor may work on it."""
        board = self.get_board_by_id(board_id)
        require_member(ctx, board, "access it")
        return board

    def check_owner(self, ctx: RequestContext, board_id: Optional[int]) -> Board:
        """Board, if the actor owns it."""
        board = self.get_board_by_id(board_id)
        require_owner(ctx, board, "manage it")
        return board

    def board_contents(self, board_id: Optional[int]) -> list[tuple[Column, list[Card]]]:
        """Columns in display order, each with its cards."""
        board = self.get_board_by_id(board_id)
        assert board.id is not None
        return [
            (column, self.uow.cards.list_for_column(column.id))  # type: ignore[arg-type]
            for column in self.uow.columns.list_for_board(board.id)
        ]

    def assignment_summary(self, board_id: Optional[int]) -> dict[Login, AssignmentSummary]:
        """Per assigned user: number of cards held in each column of the board."""
        board = self.get_board_by_id(board_id)
        assert board.id is not None
        summary: dict[Login, AssignmentSummary] = {}
        for card in self.uow.cards.list_for_board(board.id):
            for user in card.assignees:
                entry = summary.setdefault(user.login, AssignmentSummary(user=user))
                entry.cards_per_column[card.column_id] = (
                    entry.cards_per_column.get(card.column_id, 0) + 1
                )
        return summary

    # -- Mutations --
    def create_board(self, ctx: RequestContext, title: Optional[str]) -> Board:
        """The actor becomes the owner of a new board, with no participants yet."""
        check_title(title, "board")
        check_login(ctx.actor_login)
        assert title is not None

        owner = self.uow.users.get_by_primary_key(ctx.actor_login)
        if owner is None:
            raise NotFoundError(f"User {ctx.actor_login!r} not found.")

        board = Board(
            id=None,
            code=self.hasher.random_token(BOARD_CODE_LENGTH),
            title=title,
            owner=owner,
            participants=[],
        )
        with self.uow.transaction():
            if not self.uow.boards.insert(board):
                raise ConflictError("Could not store the board, please retry.")
        logger.info("Board %s created by %r", board.id, owner.login)
        return board

    def rename_board(
        self, ctx: RequestContext, board_id: Optional[int], title: Optional[str]
    ) -> Board:
        check_title(title, "board")
        board = self.get_board_by_id(board_id)
        require_owner(ctx, board, "rename the board")
        assert title is not None

        board.title = title
        with self.uow.transaction():
            self.uow.boards.update(board)
        return board

    def add_member(
        self, ctx: RequestContext, board_id: Optional[int], login: Optional[str]
    ) -> Board:
        check_login(login)
        assert login is not None
        board = self.get_board_by_id(board_id)
        require_owner(ctx, board, "add members")

        new_member = self.uow.users.get_by_primary_key(login)
        if new_member is None:
            raise NotFoundError(f"User {login!r} not found.")
        if board.is_member(login):
            raise ConflictError(f"{login!r} already owns or participates in this board.")

        with self.uow.transaction():
            if not self.uow.boards.add_participant(login, board.id):  # type: ignore[arg-type]
                raise ConflictError(f"{login!r} already participates in this board.")
        board.participants.append(new_member)
        logger.info("%r added to board %s", login, board.id)
        return board

    def remove_member(
        self, ctx: RequestContext, board_id: Optional[int], login: Optional[str]
    ) -> Board:
        """Owner removes a participant, or a participant removes themself."""
        if not login:
            raise BadRequestError("The login of the member to remove is missing.")
        board = self.get_board_by_id(board_id)

        if ctx.actor_login != login:
            require_owner(ctx, board, "remove members")
        elif board.is_owner(login):
            raise ForbiddenError("The owner cannot be removed from their own board.")

        if self.uow.users.get_by_primary_key(login) is None:
            raise NotFoundError(f"User {login!r} not found.")
        if not board.is_participant(login):
            raise ConflictError(f"{login!r} does not participate in this board.")

        self._drop_participant(board, login)
        return board

    def leave_board(self, ctx: RequestContext, board_id: Optional[int]) -> Board:
        board = self.get_board_by_id(board_id)
        if board.is_owner(ctx.actor_login):
            raise ForbiddenError("You cannot leave a board you own.")
        if not board.is_participant(ctx.actor_login):
            raise BadRequestError("You do not participate in this board.")

        self._drop_participant(board, ctx.actor_login)
        return board

    def delete_board(self, ctx: RequestContext, board_id: Optional[int]) -> None:
        board = self.get_board_by_id(board_id)
        require_owner(ctx, board, "delete the board")
        assert board.id is not None

        with self.uow.transaction():
            CascadeDeleter(self.uow).delete_board(board.id)

    # -- Internal helpers --
    def _drop_participant(self, board: Board, login: Login) -> None:
        """Unassign the user from the board's cards, then end the membership."""
        assert board.id is not None
        with self.uow.transaction():
            self.uow.boards.remove_assignments_in_board(login, board.id)
            self.uow.boards.remove_participant(login, board.id)
        board.participants = [p for p in board.participants if p.login != login]
        logger.info("%r removed from board %s", login, board.id)
