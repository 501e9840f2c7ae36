"""In-memory implementation of AddressBookStorage (no disk).
Keeps the last saved document, so read() goes through the same
denormalize/reconcile path as the JSON file.
"""

import copy

from epoch.domain import AddressBook
from epoch.infrastructure.document import from_document, to_document


class InMemoryAddressBookStorage:
    """Holds one document in memory. save_count is the number of saves so far."""

    def __init__(self, document: dict | None = None) -> None:
        self._document: dict | None = copy.deepcopy(document)
        self.save_count = 0

    @property
    def document(self) -> dict | None:
        return copy.deepcopy(self._document)

    def read(self) -> AddressBook:
        if self._document is None:
            return AddressBook()
        return from_document(copy.deepcopy(self._document))

    def save(self, address_book: AddressBook) -> None:
        self._document = to_document(address_book)
        self.save_count += 1
