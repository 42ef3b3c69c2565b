"""Custom exceptions raised by the service layer (and caught at the boundary)."""

from kanban.core.shared_types import ErrorKind


class KanbanError(Exception):
    """Top-level exception of this package."""


class ServiceError(KanbanError):
    """An operation was refused. The kind tells the boundary how to report it."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    """Missing or malformed input."""

    kind = ErrorKind.BAD_REQUEST


class NotFoundError(ServiceError):
    """Referenced board / column / card / user does not exist."""

    kind = ErrorKind.NOT_FOUND


class UnauthorizedError(ServiceError):
    """Actor lacks the required relationship with the board (or is not logged in)."""

    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(ServiceError):
    """Actor is disallowed regardless of membership."""

    kind = ErrorKind.FORBIDDEN


class ConflictError(ServiceError):
    """Creation collides with an existing unique value."""

    kind = ErrorKind.CONFLICT
