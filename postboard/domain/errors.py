"""Exception hierarchy shared by repositories and routers."""

from __future__ import annotations


class PostboardError(Exception):
    """Base class for every error raised by the postboard domain."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class PersistenceError(PostboardError):
    """A collection file could not be written (or serialized)."""


class CorruptRecordError(PersistenceError):
    """A stored record does not have the expected shape."""


class AuthError(PostboardError):
    """Base class for authentication-related exceptions."""


class DuplicateUserError(AuthError):
    """Email or mobile already belongs to another account."""


class InvalidCredentialsError(AuthError):
    pass


class NotFoundError(PostboardError):
    pass


class PostNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class PermissionDeniedError(PostboardError):
    """The requester is neither the owner nor allowed by role."""
