"""Engine error taxonomy."""


class DevlogError(Exception):
    """Base class for errors raised by the engine."""


class ValidationError(DevlogError):
    """Malformed or missing input: blank field, bad date, ambiguous filter."""


class NotFoundError(DevlogError):
    """A referenced id does not exist."""


class ConflictError(DevlogError):
    """The operation clashes with existing state."""
