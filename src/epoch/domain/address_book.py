"""AddressBook: the canonical registry of persons, groups and reminders.

The three top-level collections are plain lists mutated in place, so a view
holding a reference to one of them sees every change on its next read.
Group memberships hold the same Person instances as the top-level list.
"""

from collections.abc import Sequence

from epoch.domain.entities import Cid, Group, Person, Pid, Reminder
from epoch.domain.errors import (
    DuplicateEntityError,
    InconsistentEntityError,
    NotFoundError,
)


def _as_pid(pid: Pid | int | str) -> Pid:
    return pid if isinstance(pid, Pid) else Pid(pid)


def _as_cid(cid: Cid | int | str) -> Cid:
    return cid if isinstance(cid, Cid) else Cid(cid)


class AddressBook:
    """Owns the canonical collections and enforces identity uniqueness.
    Persons are unique by Pid, groups by Cid, reminders by structural equality.
    """

    def __init__(self) -> None:
        self._persons: list[Person] = []
        self._groups: list[Group] = []
        self._reminders: list[Reminder] = []
        self._person_index: dict[Pid, Person] = {}
        self._group_index: dict[Cid, Group] = {}

    @property
    def persons(self) -> Sequence[Person]:
        return self._persons

    @property
    def groups(self) -> Sequence[Group]:
        return self._groups

    @property
    def reminders(self) -> Sequence[Reminder]:
        return self._reminders

    def reset_data(self, other: "AddressBook") -> None:
        """Replace all data with other's, keeping the same backing lists."""
        self._persons[:] = other._persons
        self._groups[:] = other._groups
        self._reminders[:] = other._reminders
        self._person_index = dict(other._person_index)
        self._group_index = dict(other._group_index)

    # --- persons ---

    def has_person(self, person: Person) -> bool:
        return person.pid in self._person_index

    def add_person(self, person: Person) -> None:
        if self.has_person(person):
            raise DuplicateEntityError(f"Person {person.pid} already exists.")
        self._persons.append(person)
        self._person_index[person.pid] = person

    def set_person(self, target: Person, edited: Person) -> None:
        """Replace target with edited everywhere it appears, including memberships."""
        if not self.has_person(target):
            raise NotFoundError(f"Person {target.pid} not found.")
        if edited.pid != target.pid and edited.pid in self._person_index:
            raise DuplicateEntityError(f"Person {edited.pid} already exists.")
        current = self._person_index[target.pid]
        self._persons[self._persons.index(current)] = edited
        del self._person_index[target.pid]
        self._person_index[edited.pid] = edited
        for group in self._groups:
            if group.member(target.pid) is not None:
                group.replace_member(target.pid, edited)

    def remove_person(self, person: Person) -> None:
        """Remove person from the registry and from every group holding it."""
        if not self.has_person(person):
            raise NotFoundError(f"Person {person.pid} not found.")
        current = self._person_index.pop(person.pid)
        self._persons.remove(current)
        for group in self._groups:
            group.expel(current)

    def find_person_from_pid(self, pid: Pid | int | str) -> Person:
        try:
            return self._person_index[_as_pid(pid)]
        except KeyError:
            raise NotFoundError(f"No person with id {pid}.") from None

    def next_pid(self) -> Pid:
        return Pid(max((p.value for p in self._person_index), default=0) + 1)

    # --- groups ---

    def has_group(self, group: Group) -> bool:
        return group.cid in self._group_index

    def add_group(self, group: Group) -> None:
        """Register group. Its members must already be registered, unchanged."""
        if self.has_group(group):
            raise DuplicateEntityError(f"Group {group.cid} already exists.")
        self._check_members(group)
        self._groups.append(group)
        self._group_index[group.cid] = group
        self._adopt_reminders(group)

    def set_group(self, target: Group, edited: Group) -> None:
        if not self.has_group(target):
            raise NotFoundError(f"Group {target.cid} not found.")
        if edited.cid != target.cid and edited.cid in self._group_index:
            raise DuplicateEntityError(f"Group {edited.cid} already exists.")
        self._check_members(edited)
        current = self._group_index.pop(target.cid)
        self._groups[self._groups.index(current)] = edited
        self._group_index[edited.cid] = edited
        self._adopt_reminders(edited)
        self._drop_orphan_reminders(current.reminders)

    def remove_group(self, group: Group) -> None:
        """Remove group; its reminders go too unless another group holds them."""
        if not self.has_group(group):
            raise NotFoundError(f"Group {group.cid} not found.")
        current = self._group_index.pop(group.cid)
        self._groups.remove(current)
        self._drop_orphan_reminders(current.reminders)

    def find_group_from_cid(self, cid: Cid | int | str) -> Group:
        try:
            return self._group_index[_as_cid(cid)]
        except KeyError:
            raise NotFoundError(f"No group with id {cid}.") from None

    def next_cid(self) -> Cid:
        return Cid(max((c.value for c in self._group_index), default=0) + 1)

    def groups_of(self, person: Person) -> list[Group]:
        return [g for g in self._groups if g.has_member(person)]

    # --- membership ---

    def enrol(self, group: Group, person: Person) -> bool:
        """Add person to group's membership. False if already a member."""
        canonical_group = self.find_group_from_cid(group.cid)
        canonical_person = self.find_person_from_pid(person.pid)
        return canonical_group.enrol(canonical_person)

    def expel(self, group: Group, person: Person) -> bool:
        """Remove person from group's membership. False if not a member."""
        canonical_group = self.find_group_from_cid(group.cid)
        canonical_person = self.find_person_from_pid(person.pid)
        return canonical_group.expel(canonical_person)

    # --- reminders ---

    def has_reminder(self, reminder: Reminder) -> bool:
        return reminder in self._reminders

    def add_reminder(self, owner: Group, reminder: Reminder) -> None:
        canonical_owner = self.find_group_from_cid(owner.cid)
        if self.has_reminder(reminder):
            raise DuplicateEntityError(f"Reminder {reminder.title!r} already exists.")
        self._reminders.append(reminder)
        canonical_owner.add_reminder(reminder)

    def remove_reminder(self, reminder: Reminder) -> None:
        if not self.has_reminder(reminder):
            raise NotFoundError(f"Reminder {reminder.title!r} not found.")
        self._reminders.remove(reminder)
        for group in self._groups:
            group.remove_reminder(reminder)

    def owners_of(self, reminder: Reminder) -> list[Group]:
        return [g for g in self._groups if g.has_reminder(reminder)]

    # --- internals ---

    def _check_members(self, group: Group) -> None:
        for member in group.members:
            canonical = self._person_index.get(member.pid)
            if canonical is None:
                raise NotFoundError(
                    f"Group {group.cid} member {member.pid} is not a registered person."
                )
            if canonical != member:
                raise InconsistentEntityError(
                    f"Group {group.cid} holds a stale copy of person {member.pid}."
                )
            group.replace_member(member.pid, canonical)

    def _adopt_reminders(self, group: Group) -> None:
        for reminder in group.reminders:
            if reminder not in self._reminders:
                self._reminders.append(reminder)

    def _drop_orphan_reminders(self, reminders: Sequence[Reminder]) -> None:
        for reminder in reminders:
            if reminder in self._reminders and not self.owners_of(reminder):
                self._reminders.remove(reminder)

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, AddressBook):
            return NotImplemented
        return (
            self._persons == other._persons
            and self._reminders == other._reminders
            and [(g, set(g.members), set(g.reminders)) for g in self._groups]
            == [(g, set(g.members), set(g.reminders)) for g in other._groups]
        )

    def __repr__(self) -> str:
        return (
            f"AddressBook(persons={len(self._persons)}, groups={len(self._groups)}, "
            f"reminders={len(self._reminders)})"
        )
