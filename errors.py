class AppError(Exception):
    """Base class for failures a workflow can recover from by retrying."""


class RequestError(AppError):
    """The generative-AI call failed (network, auth, quota, empty reply)."""


class ParseError(AppError):
    """The AI reply did not contain a usable problem object."""


class StorageError(AppError):
    """A database read or write failed."""
