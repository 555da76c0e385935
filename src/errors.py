"""Exceptions raised by the workout model and view controller."""


class GymBuddyError(Exception):
    """Base class for application errors."""


class NotFound(GymBuddyError):
    """A routine or log entry with the given id does not exist."""


class InvalidTransition(GymBuddyError):
    """The requested action is not available from the current view."""


class ConfirmationRequired(GymBuddyError):
    """A destructive action was requested without confirmation."""


class PersistenceError(GymBuddyError):
    """Writing to the key-value store failed."""


class StorageSchemaError(GymBuddyError):
    """Stored data could not be decoded or has an unsupported schema version."""
