"""
Type definitions used across layers
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    BAD_REQUEST = "bad request"
    NOT_FOUND = "not found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class BoardRole(StrEnum):
    OWNER = "owner"
    PARTICIPANT = "participant"
    NONE = "none"
