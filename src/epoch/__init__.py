"""
ePoch core: clean-architecture layout.

- domain: entities (Person, Group, Reminder), the AddressBook registry, errors. No outer dependencies.
- application: Model with live filtered views, commands, CommandExecutor, storage port.
- infrastructure: adapters (JsonAddressBookStorage, InMemoryAddressBookStorage), document codec, phone normalization.
"""

from epoch.application import (
    AddressBookStorage,
    Command,
    CommandError,
    CommandExecutor,
    CommandResult,
    FilteredView,
    Model,
    load_address_book_or_empty,
)
from epoch.domain import (
    AddressBook,
    AddressBookError,
    Cid,
    DuplicateEntityError,
    Group,
    GroupName,
    InconsistentEntityError,
    MalformedDataError,
    NotFoundError,
    Person,
    Pid,
    Reminder,
    ValidationError,
)
from epoch.infrastructure import InMemoryAddressBookStorage, JsonAddressBookStorage

__all__ = [
    "AddressBook",
    "AddressBookError",
    "AddressBookStorage",
    "Cid",
    "Command",
    "CommandError",
    "CommandExecutor",
    "CommandResult",
    "DuplicateEntityError",
    "FilteredView",
    "Group",
    "GroupName",
    "InMemoryAddressBookStorage",
    "InconsistentEntityError",
    "JsonAddressBookStorage",
    "MalformedDataError",
    "Model",
    "NotFoundError",
    "Person",
    "Pid",
    "Reminder",
    "ValidationError",
    "load_address_book_or_empty",
]
