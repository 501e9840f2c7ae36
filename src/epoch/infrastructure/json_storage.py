"""JSON file implementation of AddressBookStorage.
The whole document is written to a temp file beside the target and swapped in
with os.replace, so a failed write leaves the previous file untouched.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from epoch.domain import AddressBook, MalformedDataError
from epoch.infrastructure.document import (
    from_document,
    to_document,
    unrepresentable_persons,
)

logger = logging.getLogger(__name__)


class JsonAddressBookStorage:
    """Stores the address book as one denormalized JSON document at path."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> AddressBook:
        if not self._path.exists():
            logger.info("Data file %s not found, starting with an empty address book", self._path)
            return AddressBook()
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedDataError(f"Could not read {self._path}: {e}") from e
        return from_document(document)

    def save(self, address_book: AddressBook) -> None:
        dropped = unrepresentable_persons(address_book)
        if dropped:
            logger.warning(
                "Persons in no group are not saved: %s",
                ", ".join(str(p.pid) for p in dropped),
            )
        payload = json.dumps(to_document(address_book), indent=2, ensure_ascii=False)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved address book to %s", self._path)
