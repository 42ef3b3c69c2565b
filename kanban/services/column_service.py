"""Column operations. Any member of the board (owner or participant) may manage its columns."""

import logging
from typing import Optional

from kanban.core.authorization import require_member
from kanban.core.context import RequestContext
from kanban.core.exceptions import ConflictError, NotFoundError
from kanban.core.models import Board, Column
from kanban.db.repository import UnitOfWork
from kanban.services.board_service import BoardService
from kanban.services.cascade import CascadeDeleter
from kanban.services.validation import check_identifier, check_title

logger = logging.getLogger(__name__)


class ColumnService:
    def __init__(self, uow: UnitOfWork, board_service: BoardService) -> None:
        self.uow = uow
        self.board_service = board_service

    def get_column(self, column_id: Optional[int]) -> Column:
        check_identifier(column_id, "column id")
        column = self.uow.columns.get_by_primary_key(column_id)
        if column is None:
            raise NotFoundError(f"Column {column_id} not found.")
        return column

    def board_of(self, column: Column) -> Board:
        return self.board_service.get_board_by_id(column.board_id)

    def list_columns_for_board(self, board_id: Optional[int]) -> list[Column]:
        """Ascending id: creation order is the display order."""
        check_identifier(board_id, "board id")
        assert board_id is not None
        return self.uow.columns.list_for_board(board_id)

    def create_column(
        self, ctx: RequestContext, board_id: Optional[int], title: Optional[str]
    ) -> Column:
        check_title(title, "column")
        check_identifier(board_id, "board id")
        assert title is not None
        board = self.board_service.get_board_by_id(board_id)
        require_member(ctx, board, "create a column")
        assert board.id is not None

        column = Column(id=None, title=title, board_id=board.id)
        with self.uow.transaction():
            if not self.uow.columns.insert(column):
                raise ConflictError("Could not store the column, please retry.")
        logger.info("Column %s created on board %s by %r", column.id, board.id, ctx.actor_login)
        return column

    def rename_column(
        self, ctx: RequestContext, column_id: Optional[int], title: Optional[str]
    ) -> Column:
        check_title(title, "column")
        assert title is not None
        column = self.get_column(column_id)
        require_member(ctx, self.board_of(column), "rename a column")

        column.title = title
        with self.uow.transaction():
            self.uow.columns.update(column)
        return column

    def delete_column(self, ctx: RequestContext, column_id: Optional[int]) -> Board:
        """Remove the column and its cards. Returns the board it belonged to."""
        column = self.get_column(column_id)
        board = self.board_of(column)
        require_member(ctx, board, "delete a column")
        assert column.id is not None

        with self.uow.transaction():
            CascadeDeleter(self.uow).delete_column(column.id)
        logger.info("Column %s deleted from board %s by %r", column.id, board.id, ctx.actor_login)
        return board
