"""
whereto.errors — Domain Exceptions
===================================

Services raise these; :mod:`whereto.api.main` turns them into HTTP
responses.  :class:`UnauthorizedError` is raised only by
:func:`whereto.api.deps.get_current_user_id` and is answered with a 401
that carries no body.
"""

from __future__ import annotations


class WhereToError(Exception):
    """Base for errors that map onto a client-facing status code."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(WhereToError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidInputError(WhereToError):
    status_code = 400


class ForbiddenError(WhereToError):
    """A friendship relationship is required but absent."""

    status_code = 403


class NotFoundError(WhereToError):
    status_code = 404
