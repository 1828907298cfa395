"""Exceptions raised by nsqlcache."""

ERR_ENTITY_NOT_FOUND = "ERR_ENTITY_NOT_FOUND"
ERR_NO_TRANSACTIONAL_BACKEND = "ERR_NO_TRANSACTIONAL_BACKEND"


class NsqlCacheError(Exception):
    """Base class for all nsqlcache errors."""

    code: str | None = None


class ConfigurationError(NsqlCacheError):
    """Raised when the cache is constructed with an invalid setup."""


class EntityNotFoundError(NsqlCacheError):
    """Raised by a datastore adapter when a requested entity does not exist.

    Batched reads translate it into ``None`` slots instead of
    propagating it.
    """

    code = ERR_ENTITY_NOT_FOUND


class BackendUnavailableError(NsqlCacheError):
    """Raised (or returned) when no transactional backend is mounted."""

    code = ERR_NO_TRANSACTIONAL_BACKEND

    def __init__(self, message: str = "No transactional backend found.") -> None:
        super().__init__(message)


class SerializationError(NsqlCacheError):
    """Raised when serialization or deserialization fails."""


def is_not_found(error: BaseException) -> bool:
    """Tell whether an adapter error means the requested entities do not exist.

    Adapters may raise EntityNotFoundError, or let their datastore client's
    own error through as long as it carries the ``ERR_ENTITY_NOT_FOUND`` code.
    """
    return getattr(error, "code", None) == ERR_ENTITY_NOT_FOUND
