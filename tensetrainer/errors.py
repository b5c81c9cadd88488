"""Exception types shared across TenseTrainer."""


class TenseTrainerError(Exception):
    """Base class for all TenseTrainer errors."""


class ContentFetchError(TenseTrainerError):
    """A content provider request failed or returned unusable data."""


class PersistenceError(TenseTrainerError):
    """A key-value store read or write failed."""


class SessionStateError(TenseTrainerError):
    """An operation was attempted in a phase that does not allow it."""
