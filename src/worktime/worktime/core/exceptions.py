class DomainError(Exception):
    """Base class for errors the HTTP layer maps onto a response."""


class ValidationError(DomainError):
    """Bad input: unknown correction fields, unparseable times, missing email."""


class AuthenticationError(DomainError):
    """Sign-in refused (wrong credentials or deactivated account)."""


class AuthorizationError(DomainError):
    """The signed-in role may not perform this operation."""


class StorageError(DomainError):
    """A key-value read or write failed and the failure policy is 'raise'."""
