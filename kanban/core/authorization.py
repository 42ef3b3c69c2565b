"""
Who may mutate what.

Two relations over (user, board): owner and participant. Their union (member) gates the column and card operations,
while renaming / deleting a board and managing its members are reserved to the owner.
"""

from kanban.core.context import RequestContext
from kanban.core.exceptions import UnauthorizedError
from kanban.core.models import Board, Login
from kanban.core.shared_types import BoardRole


def is_owner(login: Login, board: Board) -> bool:
    return board.is_owner(login)


def is_participant(login: Login, board: Board) -> bool:
    return board.is_participant(login)


def is_member(login: Login, board: Board) -> bool:
    return board.is_member(login)


def role_of(login: Login, board: Board) -> BoardRole:
    if is_owner(login, board):
        return BoardRole.OWNER
    if is_participant(login, board):
        return BoardRole.PARTICIPANT
    return BoardRole.NONE


def require_owner(ctx: RequestContext, board: Board, action: str) -> None:
    """Raise if the actor does not own the board."""
    if not is_owner(ctx.actor_login, board):
        raise UnauthorizedError(
            f"Only the owner of board {board.id} can {action}."
        )


def require_member(ctx: RequestContext, board: Board, action: str) -> None:
    """Raise if the actor is neither the owner nor a participant of the board."""
    if not is_member(ctx.actor_login, board):
        raise UnauthorizedError(
            f"You must be a member of board {board.id} to {action}."
        )
