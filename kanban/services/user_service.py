"""Account operations: registration, authentication, profile update and deletion."""

import logging
from dataclasses import dataclass
from typing import Optional

from kanban.auth.passwords import PasswordHasher
from kanban.core.context import RequestContext
from kanban.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from kanban.core.models import User
from kanban.db.repository import UnitOfWork
from kanban.services.cascade import CascadeDeleter
from kanban.services.validation import (
    check_email,
    check_login,
    check_password_strength,
    check_passwords_match,
    check_person_name,
)

logger = logging.getLogger(__name__)


@dataclass
class UserStatistics:
    participations: int
    assigned_cards: int


class UserService:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self.uow = uow
        self.hasher = hasher

    # -- Lookups --
    def get_user(self, login: Optional[str]) -> User:
        if login is None:
            raise BadRequestError("The login is missing.")
        user = self.uow.users.get_by_primary_key(login)
        if user is None:
            raise NotFoundError(f"User {login!r} not found.")
        return user

    def list_users(self) -> list[User]:
        return self.uow.users.get_ordered_by(["name", "surname"])

    def statistics(self, login: Optional[str]) -> UserStatistics:
        user = self.get_user(login)
        return UserStatistics(
            participations=self.uow.boards.count_participations(user.login),
            assigned_cards=self.uow.cards.count_assignments(user.login),
        )

    def ensure_same_user(self, ctx: RequestContext, login: Optional[str]) -> None:
        """Refuse to act on somebody else's account."""
        check_login(login)
        if ctx.actor_login != login:
            raise UnauthorizedError("You do not have access to this account.")

    # -- Account lifecycle --
    def register(
        self,
        login: Optional[str],
        name: Optional[str],
        surname: Optional[str],
        email: Optional[str],
        password: Optional[str],
        password_confirmation: Optional[str],
    ) -> User:
        """Create an account. Only a hash of the password is stored."""
        if None in (login, name, surname, email, password, password_confirmation):
            raise BadRequestError("Login, name, surname, email and both passwords are required.")
        assert login is not None and email is not None and password is not None
        check_login(login)
        check_email(email)
        check_password_strength(password)
        check_person_name(name, surname)
        check_passwords_match(password, password_confirmation)

        if self.uow.users.get_by_primary_key(login) is not None:
            raise ConflictError("This login is already taken.")
        if self.uow.users.get_by_email(email):
            raise ConflictError("An account already uses this email address.")

        user = User(
            login=login,
            name=name,  # type: ignore[arg-type]
            surname=surname,  # type: ignore[arg-type]
            email=email,
            password_hash=self.hasher.hash(password),
        )
        with self.uow.transaction():
            if not self.uow.users.insert(user):
                raise ConflictError("This login or email address is already in use.")
        logger.info("User %r registered", login)
        return user

    def authenticate(self, login: Optional[str], password: Optional[str]) -> User:
        if login is None or password is None:
            raise BadRequestError("Login or password missing.")
        user = self.get_user(login)
        if not self.hasher.verify(password, user.password_hash):
            raise UnauthorizedError("Incorrect password.")
        return user

    def update(
        self,
        ctx: RequestContext,
        name: Optional[str],
        surname: Optional[str],
        email: Optional[str],
        old_password: Optional[str],
        new_password: Optional[str] = None,
        new_password_confirmation: Optional[str] = None,
    ) -> User:
        """
        Update the actor's profile.

        The password only changes when a new one is supplied, and only after the old one checks out.
        """
        check_login(ctx.actor_login)
        check_person_name(name, surname)
        check_email(email)
        assert email is not None
        user = self.get_user(ctx.actor_login)

        for other in self.uow.users.get_by_email(email):
            if other.login != user.login:
                raise ForbiddenError("This email address is used by another account.")

        if new_password or new_password_confirmation:
            check_passwords_match(new_password, new_password_confirmation)
            check_password_strength(new_password)
            assert new_password is not None
            if old_password is None or not self.hasher.verify(old_password, user.password_hash):
                raise ForbiddenError("Cannot change the password: the old password is wrong.")
            user.password_hash = self.hasher.hash(new_password)

        user.name = name  # type: ignore[assignment]
        user.surname = surname  # type: ignore[assignment]
        user.email = email
        with self.uow.transaction():
            self.uow.users.update(user)
        logger.info("User %r updated", user.login)
        return user

    def delete(self, ctx: RequestContext) -> None:
        """Delete the actor's account, their owned boards and every link pointing at them."""
        check_login(ctx.actor_login)
        user = self.get_user(ctx.actor_login)
        with self.uow.transaction():
            CascadeDeleter(self.uow).delete_user(user.login)
