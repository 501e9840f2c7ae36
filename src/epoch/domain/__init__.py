"""Domain layer: entities, the AddressBook registry and errors. No dependencies on outer layers."""

from epoch.domain.address_book import AddressBook
from epoch.domain.entities import (
    NAME_CONSTRAINTS,
    Cid,
    Group,
    GroupName,
    Person,
    Pid,
    Reminder,
    as_utc,
    is_valid_name,
)
from epoch.domain.errors import (
    AddressBookError,
    DuplicateEntityError,
    InconsistentEntityError,
    MalformedDataError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "NAME_CONSTRAINTS",
    "AddressBook",
    "AddressBookError",
    "Cid",
    "DuplicateEntityError",
    "Group",
    "GroupName",
    "InconsistentEntityError",
    "MalformedDataError",
    "NotFoundError",
    "Person",
    "Pid",
    "Reminder",
    "ValidationError",
    "as_utc",
    "is_valid_name",
]
