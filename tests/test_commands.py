"""Unit tests for commands and CommandExecutor. In-memory storage only."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from epoch.application import (
    AddGroupCommand,
    AddPersonCommand,
    AddReminderCommand,
    ClearCommand,
    CommandError,
    CommandExecutor,
    DeleteGroupCommand,
    DeletePersonCommand,
    DeleteReminderCommand,
    EditPersonCommand,
    EnrolCommand,
    ExitCommand,
    ExpelCommand,
    FindGroupsOfPersonCommand,
    FindPersonCommand,
    ListCommand,
    Model,
    RemindersDueCommand,
    RenameGroupCommand,
)
from epoch.domain import Pid
from epoch.infrastructure import InMemoryAddressBookStorage


def _executor() -> tuple[CommandExecutor, InMemoryAddressBookStorage]:
    storage = InMemoryAddressBookStorage()
    return CommandExecutor(Model(), storage), storage


def _seeded() -> tuple[CommandExecutor, InMemoryAddressBookStorage]:
    executor, storage = _executor()
    executor.execute(AddGroupCommand("Chess Club"))
    executor.execute(AddPersonCommand("Alice", phone="91234567"))
    executor.execute(AddPersonCommand("Bob"))
    return executor, storage


def test_add_commands_allocate_ids() -> None:
    executor, _ = _seeded()
    model = executor.model
    assert [p.pid for p in model.address_book.persons] == [Pid(1), Pid(2)]
    assert str(model.find_group_from_cid(1).name) == "Chess Club"


def test_mutating_commands_save_read_only_commands_do_not() -> None:
    executor, storage = _seeded()
    assert storage.save_count == 3
    executor.execute(ListCommand())
    executor.execute(FindPersonCommand(("alice",)))
    assert storage.save_count == 3
    executor.execute(EnrolCommand(1, 1))
    assert storage.save_count == 4


def test_saved_document_reflects_completed_mutation() -> None:
    executor, storage = _seeded()
    executor.execute(EnrolCommand(1, 1))
    members = storage.document["groups"][0]["members"]
    assert [m["name"] for m in members] == ["Alice"]


def test_enrol_and_expel_messages() -> None:
    executor, _ = _seeded()
    assert executor.execute(EnrolCommand(1, 1)).feedback == "Enrolled Alice into Chess Club"
    assert "already a member" in executor.execute(EnrolCommand(1, 1)).feedback
    assert executor.execute(ExpelCommand(1, 1)).feedback == "Expelled Alice from Chess Club"
    assert "is not a member" in executor.execute(ExpelCommand(1, 1)).feedback


def test_add_person_uses_phone_normalizer() -> None:
    executor, _ = _executor()
    executor.execute(AddPersonCommand("Alice", phone="9123 4567", phone_normalizer=lambda raw: "+6591234567"))
    executor.execute(AddPersonCommand("Bob", phone="12", phone_normalizer=lambda raw: None))
    alice, bob = executor.model.address_book.persons
    assert alice.phone == "+6591234567"
    assert bob.phone == "12"


def test_edit_person_follows_into_groups() -> None:
    executor, _ = _seeded()
    executor.execute(EnrolCommand(1, 1))
    executor.execute(EditPersonCommand(Pid(1), name="Alicia", tags=("captain",)))
    member = executor.model.find_group_from_cid(1).members[0]
    assert member.name == "Alicia"
    assert member.tags == frozenset({"captain"})
    assert member.phone == "91234567"


def test_edit_person_without_fields_is_rejected() -> None:
    executor, _ = _seeded()
    with pytest.raises(CommandError, match="At least one field"):
        executor.execute(EditPersonCommand(Pid(1)))


def test_delete_person_removes_membership() -> None:
    executor, _ = _seeded()
    executor.execute(EnrolCommand(1, 2))
    executor.execute(DeletePersonCommand(2))
    assert executor.model.find_group_from_cid(1).members == ()


def test_registry_errors_become_command_errors() -> None:
    executor, storage = _seeded()
    with pytest.raises(CommandError) as not_found:
        executor.execute(EnrolCommand(1, 99))
    assert not_found.value.kind == "not_found"

    with pytest.raises(CommandError) as invalid:
        executor.execute(AddGroupCommand("Chess!"))
    assert invalid.value.kind == "invalid"
    assert "alphanumeric" in invalid.value.message

    with pytest.raises(CommandError) as duplicate:
        executor.execute(AddGroupCommand("Chess Club"))
    assert duplicate.value.kind == "duplicate"
    assert storage.save_count == 3


def test_rename_and_delete_group() -> None:
    executor, _ = _seeded()
    executor.execute(AddGroupCommand("Choir"))
    with pytest.raises(CommandError, match="already exists"):
        executor.execute(RenameGroupCommand(1, "Choir"))
    executor.execute(RenameGroupCommand(1, "Chess Society"))
    assert str(executor.model.find_group_from_cid(1).name) == "Chess Society"
    executor.execute(DeleteGroupCommand(2))
    assert [g.cid.value for g in executor.model.address_book.groups] == [1]


def test_find_groups_of_person_filters_group_view() -> None:
    executor, _ = _seeded()
    executor.execute(AddGroupCommand("Choir"))
    executor.execute(EnrolCommand(2, 2))
    result = executor.execute(FindGroupsOfPersonCommand(2))
    assert result.feedback == "1 groups listed for Bob"
    assert [str(g.name) for g in executor.model.filtered_groups] == ["Choir"]
    executor.execute(ListCommand())
    assert len(executor.model.filtered_groups) == 2


def test_reminder_commands_use_the_shown_view() -> None:
    executor, _ = _seeded()
    executor.execute(AddReminderCommand(1, "Old", datetime(2020, 1, 1)))
    executor.execute(AddReminderCommand(1, "New", datetime(2030, 1, 1)))
    executor.execute(RemindersDueCommand(datetime(2025, 1, 1)))
    assert [r.title for r in executor.model.filtered_reminders] == ["Old"]

    executor.execute(DeleteReminderCommand(1))

    assert [r.title for r in executor.model.address_book.reminders] == ["New"]
    with pytest.raises(CommandError, match="index"):
        executor.execute(DeleteReminderCommand(1))


def test_clear_and_exit() -> None:
    executor, storage = _seeded()
    executor.execute(ClearCommand())
    assert len(executor.model.filtered_persons) == 0
    assert storage.document == {"groups": []}
    assert executor.execute(ExitCommand()).exit is True


def test_failed_save_surfaces_as_storage_error() -> None:
    class BrokenStorage(InMemoryAddressBookStorage):
        def save(self, address_book):
            raise OSError("read-only file system")

    executor = CommandExecutor(Model(), BrokenStorage())
    with pytest.raises(CommandError) as error:
        executor.execute(AddGroupCommand("Chess Club"))
    assert error.value.kind == "storage"
    assert executor.model.has_group(executor.model.find_group_from_cid(1))


def test_due_filter_handles_mixed_naive_and_utc_dates() -> None:
    storage = InMemoryAddressBookStorage(
        {
            "groups": [
                {
                    "cid": 1,
                    "name": "Chess Club",
                    "reminders": [
                        {"title": "Zulu", "due": "2024-05-01T10:00:00Z"},
                        {"title": "Offset", "due": "2026-05-01T10:00:00+08:00"},
                    ],
                }
            ]
        }
    )
    executor = CommandExecutor(Model(storage.read()), storage)
    executor.execute(AddReminderCommand(1, "Naive", datetime(2024, 6, 1, 9, 0)))

    result = executor.execute(RemindersDueCommand(datetime(2025, 1, 1)))

    assert result.feedback == "2 reminders listed!"
    assert [r.title for r in executor.model.filtered_reminders] == ["Zulu", "Naive"]
    assert storage.document["groups"][0]["reminders"][1]["due"] == "2026-05-01T02:00:00+00:00"


def test_concurrent_commands_never_save_a_half_applied_edit() -> None:
    class SlowStorage(InMemoryAddressBookStorage):
        def __init__(self) -> None:
            super().__init__()
            self._guard = threading.Lock()
            self.active = 0
            self.max_active = 0

        def save(self, address_book):
            with self._guard:
                self.active += 1
                self.max_active = max(self.max_active, self.active)
            time.sleep(0.002)
            super().save(address_book)
            with self._guard:
                self.active -= 1

    storage = SlowStorage()
    executor = CommandExecutor(Model(), storage)
    executor.execute(AddGroupCommand("Chess Club"))
    executor.execute(AddGroupCommand("Go Club"))
    executor.execute(AddPersonCommand("Alice"))
    executor.execute(EnrolCommand(1, 1))
    executor.execute(EnrolCommand(2, 1))

    def edit(i: int) -> list[str]:
        executor.execute(EditPersonCommand(1, phone=f"9000{i:04d}"))
        return executor.read(lambda m: [p.phone for p in m.filtered_persons])

    with ThreadPoolExecutor(max_workers=8) as pool:
        seen = list(pool.map(edit, range(40)))

    assert storage.max_active == 1
    assert all(len(phones) == 1 for phones in seen)
    reloaded = storage.read()
    chess, go = reloaded.groups
    assert chess.members[0] is go.members[0]
    assert chess.members[0] == executor.model.find_person_from_pid(1)
