"""Translate service failures into HTTP statuses. Only the boundary knows about status codes."""

from http import HTTPStatus

from kanban.api.models import ErrorResponse
from kanban.core.exceptions import ServiceError
from kanban.core.shared_types import ErrorKind

HTTP_STATUS_BY_KIND: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
}


def status_for(error: ServiceError) -> HTTPStatus:
    return HTTP_STATUS_BY_KIND[error.kind]


def error_payload(error: ServiceError) -> ErrorResponse:
    return ErrorResponse(kind=error.kind, status=int(status_for(error)), message=error.message)
