"""
Domain data model.

These records are shared by all layers: repositories build them from rows, services check and mutate them,
and the API layer converts them to JSON shapes. They hold no behaviour beyond the accessors that read the invariants.
"""

from dataclasses import dataclass, field
from typing import Optional

Login = str


@dataclass
class User:
    login: Login
    name: str
    surname: str
    email: str
    password_hash: str = field(repr=False)


@dataclass
class Board:
    """A shareable kanban board. The owner is implicitly a member but never listed among the participants."""

    id: Optional[int]
    code: str
    title: str
    owner: User
    participants: list[User] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.participants = [p for p in self.participants if p.login != self.owner.login]

    def is_owner(self, login: Login) -> bool:
        return self.owner.login == login

    def is_participant(self, login: Login) -> bool:
        return login in self.participant_logins

    def is_member(self, login: Login) -> bool:
        return self.is_owner(login) or self.is_participant(login)

    @property
    def participant_logins(self) -> list[Login]:
        return [p.login for p in self.participants]

    @property
    def member_logins(self) -> list[Login]:
        """Owner first, then the participants."""
        return [self.owner.login, *self.participant_logins]


@dataclass
class Column:
    """Container of cards. The board is only referenced by id and never changes after creation."""

    id: Optional[int]
    title: str
    board_id: int


@dataclass
class Card:
    id: Optional[int]
    title: str
    description: str
    color: str
    column_id: int
    assignees: list[User] = field(default_factory=list)

    @property
    def assignee_logins(self) -> list[Login]:
        return [u.login for u in self.assignees]
