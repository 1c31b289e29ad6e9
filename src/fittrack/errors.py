"""Exceptions raised by the fittrack data layer."""


class FitTrackError(Exception):
    """Base class for fittrack errors."""


class NotFound(FitTrackError):
    """A record targeted by an update does not exist."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"No {table} record with id {record_id!r}")
        self.table = table
        self.record_id = record_id


class ConstraintViolation(FitTrackError):
    """An insert collided with an existing identifier."""


class StorageUnavailable(FitTrackError):
    """The storage engine failed. Not retried; reopen the store to recover."""


class DeserializationFailure(FitTrackError):
    """A stored blob could not be decoded.

    Readers treat this as "use the default" rather than surfacing it.
    """
