"""Error taxonomy for the address book core.

Construction-time and registry errors are raised synchronously to the caller
(the command layer turns them into user-facing messages). Load-time errors
abort the whole load.
"""


class AddressBookError(Exception):
    """Base class for every error raised by the address book core."""


class ValidationError(AddressBookError, ValueError):
    """An identifier, name or field failed validation at construction time."""


class DuplicateEntityError(AddressBookError):
    """An entity with the same identity is already registered."""


class NotFoundError(AddressBookError, LookupError):
    """No registered entity carries the requested identity."""


class InconsistentEntityError(AddressBookError):
    """The same identity was found with conflicting field values."""


class MalformedDataError(AddressBookError):
    """A persisted document could not be parsed or failed field validation."""
