"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from epoch.domain import AddressBook


class AddressBookStorage(Protocol):
    """Reads and writes the whole address book as one document."""

    def read(self) -> AddressBook:
        """Return the stored address book (empty if nothing was stored yet).
        Raises MalformedDataError or InconsistentEntityError if the document is unusable.
        """
        ...

    def save(self, address_book: AddressBook) -> None:
        """Replace the stored document with address_book. Never leaves a partial document."""
        ...
