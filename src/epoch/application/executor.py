"""Runs commands against the model and persists after every mutating command."""

import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from epoch.application.commands import Command
from epoch.application.dto import CommandError, CommandResult
from epoch.application.model import Model
from epoch.application.ports import AddressBookStorage
from epoch.domain import (
    AddressBook,
    AddressBookError,
    DuplicateEntityError,
    InconsistentEntityError,
    MalformedDataError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_kind(error: AddressBookError) -> str:
    if isinstance(error, NotFoundError):
        return "not_found"
    if isinstance(error, DuplicateEntityError):
        return "duplicate"
    if isinstance(error, InconsistentEntityError):
        return "conflict"
    return "invalid"


def load_address_book_or_empty(storage: AddressBookStorage) -> AddressBook:
    """Read the stored address book; on a bad document start from an empty one."""
    try:
        address_book = storage.read()
    except (MalformedDataError, InconsistentEntityError) as e:
        logger.warning("Data file could not be loaded, starting with an empty address book: %s", e)
        return AddressBook()
    logger.info("Loaded %r", address_book)
    return address_book


class CommandExecutor:
    """One command at a time: mutation completes, then the whole document is saved.

    Callers may run on several threads (the API serves sync routes from a
    threadpool). A reentrant lock covers mutate+save and every view read, so a
    save never sees a half-applied command and a predicate set by one caller
    is the one that caller reads back.
    """

    def __init__(self, model: Model, storage: AddressBookStorage) -> None:
        self._model = model
        self._storage = storage
        self._lock = threading.RLock()

    @property
    def model(self) -> Model:
        return self._model

    def execute(self, command: Command) -> CommandResult:
        with self._lock:
            return self._execute(command)

    def execute_and_read(self, command: Command, read: Callable[[Model], T]) -> T:
        """Run command, then read from the model before any other command runs."""
        with self._lock:
            self._execute(command)
            return read(self._model)

    def read(self, read: Callable[[Model], T]) -> T:
        with self._lock:
            return read(self._model)

    def _execute(self, command: Command) -> CommandResult:
        logger.info("Executing %s", type(command).__name__)
        try:
            result = command.execute(self._model)
        except AddressBookError as e:
            raise CommandError(str(e), kind=_error_kind(e)) from e
        if command.mutates:
            try:
                self._storage.save(self._model.address_book)
            except OSError as e:
                logger.error("Could not save data file: %s", e)
                raise CommandError(f"Could not save data file: {e}", kind="storage") from e
        return result
