"""
Boundary layer data model(s).

JSON shapes of the entities, as sent to the web client. The password hash is never part of any shape.
Field names are serialized in camelCase (boardId, columnId); use model_dump(by_alias=True).
"""

from typing import Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from kanban.core.models import Board, Card, Column, User
from kanban.core.shared_types import ErrorKind


class _Response(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserResponse(_Response):
    login: str
    name: str
    surname: str
    email: str

    @classmethod
    def from_entity(cls, user: User) -> Self:
        return cls(login=user.login, name=user.name, surname=user.surname, email=user.email)


class BoardResponse(_Response):
    id: int
    code: str
    title: str
    owner: UserResponse
    participants: list[UserResponse]

    @classmethod
    def from_entity(cls, board: Board) -> Self:
        return cls(
            id=board.id,
            code=board.code,
            title=board.title,
            owner=UserResponse.from_entity(board.owner),
            participants=[UserResponse.from_entity(p) for p in board.participants],
        )


class ColumnResponse(_Response):
    id: int
    title: str
    board_id: int

    @classmethod
    def from_entity(cls, column: Column) -> Self:
        return cls(id=column.id, title=column.title, board_id=column.board_id)


class CardResponse(_Response):
    id: int
    title: str
    description: str
    color: str
    column_id: int
    assignees: list[UserResponse]

    @classmethod
    def from_entity(cls, card: Card) -> Self:
        return cls(
            id=card.id,
            title=card.title,
            description=card.description,
            color=card.color,
            column_id=card.column_id,
            assignees=[UserResponse.from_entity(u) for u in card.assignees],
        )


class ErrorResponse(_Response):
    kind: ErrorKind
    status: int
    message: str
