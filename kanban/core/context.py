"""Request-scoped context handed to every mutating service call."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Identity of the user on whose behalf the current request runs."""

    actor_login: str
