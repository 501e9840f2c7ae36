"""Commands: one object per user action, executed against the Model.

Argument parsing lives outside the core; callers build these directly.
Registry errors (duplicate, not found, validation) propagate to the
CommandExecutor, which turns them into CommandError.
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Protocol

from epoch.application.dto import CommandError, CommandResult
from epoch.application.model import Model
from epoch.application.predicates import (
    GroupHasMember,
    NameContainsKeywords,
    ReminderDueBefore,
)
from epoch.domain import AddressBook, Cid, Group, GroupName, Person, Pid, Reminder


class Command(Protocol):
    """Receives the model, returns a result. mutates=True means save afterwards."""

    mutates: ClassVar[bool]

    def execute(self, model: Model) -> CommandResult:
        ...


@dataclass(frozen=True)
class ListCommand:
    mutates: ClassVar[bool] = False
    MESSAGE_SUCCESS: ClassVar[str] = "Listed all persons, groups and reminders"

    def execute(self, model: Model) -> CommandResult:
        model.reset_all_views()
        return CommandResult(self.MESSAGE_SUCCESS)


@dataclass(frozen=True)
class ClearCommand:
    mutates: ClassVar[bool] = True

    def execute(self, model: Model) -> CommandResult:
        model.reset_address_book(AddressBook())
        model.reset_all_views()
        return CommandResult("Address book has been cleared!")


@dataclass(frozen=True)
class ExitCommand:
    mutates: ClassVar[bool] = False

    def execute(self, model: Model) -> CommandResult:
        return CommandResult("Exiting as requested ...", exit=True)


# --- persons ---


@dataclass(frozen=True)
class AddPersonCommand:
    """Adds a person under the next free pid.
    phone_normalizer, when given, maps raw input to a canonical number (or None to keep it as typed).
    """

    mutates: ClassVar[bool] = True

    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    tags: tuple[str, ...] = ()
    phone_normalizer: Callable[[str], str | None] | None = field(
        default=None, compare=False
    )

    def execute(self, model: Model) -> CommandResult:
        phone = (self.phone or "").strip()
        if phone and self.phone_normalizer is not None:
            phone = self.phone_normalizer(phone) or phone
        person = Person(
            pid=model.address_book.next_pid(),
            name=(self.name or "").strip(),
            phone=phone,
            email=self.email,
            address=self.address,
            tags=frozenset(self.tags),
        )
        model.add_person(person)
        return CommandResult(f"New person added: {person.name} (id {person.pid})")


@dataclass(frozen=True)
class EditPersonCommand:
    """Replaces the person's fields; memberships follow the edit."""

    mutates: ClassVar[bool] = True

    pid: Pid
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    tags: tuple[str, ...] | None = None

    def execute(self, model: Model) -> CommandResult:
        target = model.find_person_from_pid(self.pid)
        changes = {
            key: value
            for key, value in (
                ("name", self.name),
                ("phone", self.phone),
                ("email", self.email),
                ("address", self.address),
            )
            if value is not None
        }
        if self.tags is not None:
            changes["tags"] = frozenset(self.tags)
        if not changes:
            raise CommandError("At least one field to edit must be provided.")
        edited = dataclasses.replace(target, **changes)
        model.set_person(target, edited)
        return CommandResult(f"Edited person: {edited.name} (id {edited.pid})")


@dataclass(frozen=True)
class DeletePersonCommand:
    mutates: ClassVar[bool] = True

    pid: Pid

    def execute(self, model: Model) -> CommandResult:
        target = model.find_person_from_pid(self.pid)
        model.delete_person(target)
        return CommandResult(f"Deleted person: {target.name} (id {target.pid})")


@dataclass(frozen=True)
class FindPersonCommand:
    mutates: ClassVar[bool] = False

    keywords: tuple[str, ...]

    def execute(self, model: Model) -> CommandResult:
        model.update_filtered_persons(NameContainsKeywords(self.keywords))
        return CommandResult(f"{len(model.filtered_persons)} persons listed!")


# --- groups ---


@dataclass(frozen=True)
class AddGroupCommand:
    mutates: ClassVar[bool] = True

    name: str

    def execute(self, model: Model) -> CommandResult:
        name = GroupName(self.name)
        if any(g.name == name for g in model.address_book.groups):
            raise CommandError("This group already exists", kind="duplicate")
        group = Group(model.address_book.next_cid(), name)
        model.add_group(group)
        return CommandResult(f"New group added: {name} (id {group.cid})")


@dataclass(frozen=True)
class RenameGroupCommand:
    mutates: ClassVar[bool] = True

    cid: Cid
    name: str

    def execute(self, model: Model) -> CommandResult:
        target = model.find_group_from_cid(self.cid)
        name = GroupName(self.name)
        if any(g.name == name and g.cid != target.cid for g in model.address_book.groups):
            raise CommandError("This group already exists", kind="duplicate")
        model.set_group(target, target.renamed(name))
        return CommandResult(f"Renamed group {target.cid} to {name}")


@dataclass(frozen=True)
class DeleteGroupCommand:
    mutates: ClassVar[bool] = True

    cid: Cid

    def execute(self, model: Model) -> CommandResult:
        target = model.find_group_from_cid(self.cid)
        model.delete_group(target)
        return CommandResult(f"Deleted group: {target.name} (id {target.cid})")


@dataclass(frozen=True)
class EnrolCommand:
    mutates: ClassVar[bool] = True

    cid: Cid
    pid: Pid

    def execute(self, model: Model) -> CommandResult:
        group = model.find_group_from_cid(self.cid)
        person = model.find_person_from_pid(self.pid)
        if not model.enrol(group, person):
            return CommandResult(f"{person.name} is already a member of {group.name}")
        return CommandResult(f"Enrolled {person.name} into {group.name}")


@dataclass(frozen=True)
class ExpelCommand:
    mutates: ClassVar[bool] = True

    cid: Cid
    pid: Pid

    def execute(self, model: Model) -> CommandResult:
        group = model.find_group_from_cid(self.cid)
        person = model.find_person_from_pid(self.pid)
        if not model.expel(group, person):
            return CommandResult(f"{person.name} is not a member of {group.name}")
        return CommandResult(f"Expelled {person.name} from {group.name}")


@dataclass(frozen=True)
class FindGroupsOfPersonCommand:
    mutates: ClassVar[bool] = False

    pid: Pid

    def execute(self, model: Model) -> CommandResult:
        person = model.find_person_from_pid(self.pid)
        model.update_filtered_groups(GroupHasMember(person.pid))
        return CommandResult(f"{len(model.filtered_groups)} groups listed for {person.name}")


# --- reminders ---


@dataclass(frozen=True)
class AddReminderCommand:
    mutates: ClassVar[bool] = True

    cid: Cid
    title: str
    due: datetime

    def execute(self, model: Model) -> CommandResult:
        owner = model.find_group_from_cid(self.cid)
        reminder = Reminder(title=self.title, due=self.due)
        model.add_reminder(owner, reminder)
        return CommandResult(f"New reminder added to {owner.name}: {reminder.title}")


@dataclass(frozen=True)
class DeleteReminderCommand:
    """Deletes the reminder at a 1-based position of the reminder view as currently shown."""

    mutates: ClassVar[bool] = True

    index: int

    def execute(self, model: Model) -> CommandResult:
        shown = list(model.filtered_reminders)
        if self.index < 1 or self.index > len(shown):
            raise CommandError("The reminder index provided is invalid", kind="not_found")
        target = shown[self.index - 1]
        model.delete_reminder(target)
        return CommandResult(f"Deleted reminder: {target.title}")


@dataclass(frozen=True)
class RemindersDueCommand:
    mutates: ClassVar[bool] = False

    before: datetime

    def execute(self, model: Model) -> CommandResult:
        model.update_filtered_reminders(ReminderDueBefore(self.before))
        return CommandResult(f"{len(model.filtered_reminders)} reminders listed!")
