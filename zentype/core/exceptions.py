"""
Error taxonomy shared by the submission pipeline and the API layer.

Validation and authentication errors are expected and cheap; everything
under StorageError comes from the document store and is surfaced as an
internal error.
"""


class ZentypeError(Exception):
    """Base exception for every error raised by the app."""
    pass


class ValidationError(ZentypeError):
    """Raised when a submission payload breaks one or more field rules."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Validation failed: " + ", ".join(self.errors))


class AuthenticationError(ZentypeError):
    """Raised when the bearer credential is missing, malformed or not verifiable."""
    pass


class ProfileNotFoundError(ZentypeError):
    """Raised when a verified user has no backing profile."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Profile {user_id} not found")


class ProfileAlreadyExistsError(ZentypeError):
    """Raised when provisioning a profile that already exists."""
    pass


class StorageError(ZentypeError):
    """Base exception for document store failures."""

    retryable = False


class TransactionConflictError(StorageError):
    """The store could not commit atomically (contention, timeout). Safe to retry."""

    retryable = True


class StorageUnavailableError(StorageError):
    """The store could not be reached."""
    pass


class TransactionOrderError(ZentypeError):
    """A read was issued after a write inside the same transaction."""
    pass
