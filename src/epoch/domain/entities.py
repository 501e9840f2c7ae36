"""Domain entities: identifiers (Pid, Cid), Person, Reminder and Group."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from epoch.domain.errors import InconsistentEntityError, ValidationError

NAME_CONSTRAINTS = (
    "Names should only contain alphanumeric characters and spaces, "
    "and it should not be blank"
)
# First character must not be a space, otherwise " " would be a valid name.
_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9 ]*")
_TAG_PATTERN = re.compile(r"[A-Za-z0-9]+")
TITLE_MAX_LENGTH = 200


def is_valid_name(test: str) -> bool:
    """Return True if test is alphanumeric-and-space and does not start blank."""
    return isinstance(test, str) and _NAME_PATTERN.fullmatch(test) is not None


def as_utc(moment: datetime) -> datetime:
    """Aware UTC form of moment. Naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _parse_positive_int(kind: str, value: object) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{kind} must be a positive integer, got {value!r}.")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        # isdigit() alone accepts "²", which int() cannot parse.
        number = int(value.strip())
    else:
        raise ValidationError(f"{kind} must be a positive integer, got {value!r}.")
    if number <= 0:
        raise ValidationError(f"{kind} must be a positive integer, got {value!r}.")
    return number


@dataclass(frozen=True, order=True)
class Pid:
    """Identity of a Person. Positive integer, unique within an AddressBook."""

    value: int

    def __post_init__(self):
        object.__setattr__(self, "value", _parse_positive_int("Pid", self.value))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Cid:
    """Identity of a Group. Positive integer, unique within an AddressBook."""

    value: int

    def __post_init__(self):
        object.__setattr__(self, "value", _parse_positive_int("Cid", self.value))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class GroupName:
    """Display name of a Group. Immutable; alphanumeric and spaces, not blank."""

    full_name: str

    def __post_init__(self):
        if not is_valid_name(self.full_name):
            raise ValidationError(NAME_CONSTRAINTS)

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class Person:
    """
    A person known to the address book.
    Immutable; edits replace the instance under the same Pid.
    Contact fields are opaque strings to the core.
    """

    pid: Pid
    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.pid, Pid):
            object.__setattr__(self, "pid", Pid(self.pid))
        if not is_valid_name(self.name):
            raise ValidationError(NAME_CONSTRAINTS)
        for attr in ("phone", "email", "address"):
            value = getattr(self, attr)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValidationError(f"Person {attr} must be a string.")
            object.__setattr__(self, attr, value.strip())
        tags = frozenset(self.tags or ())
        for tag in tags:
            if not isinstance(tag, str) or not _TAG_PATTERN.fullmatch(tag):
                raise ValidationError(f"Tag names should be alphanumeric, got {tag!r}.")
        object.__setattr__(self, "tags", tags)

    def is_same_person(self, other: "Person | None") -> bool:
        """Identity check: same Pid, regardless of the other fields."""
        return other is not None and other.pid == self.pid


@dataclass(frozen=True)
class Reminder:
    """A scheduled note owned by one or more groups. Equality is structural.
    due is stored as an aware UTC datetime so every due date compares with every other.
    """

    title: str
    due: datetime

    def __post_init__(self):
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("Reminder title must be non-empty.")
        title = self.title.strip()
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Reminder title must be at most {TITLE_MAX_LENGTH} chars."
            )
        object.__setattr__(self, "title", title)
        if not isinstance(self.due, datetime):
            raise ValidationError("Reminder due must be a datetime.")
        object.__setattr__(self, "due", as_utc(self.due))


class Group:
    """
    A named activity with a mutable membership and a set of reminders.

    Members are kept as an identity-keyed mapping (Pid -> Person) so the same
    person can never be held twice, and so an edited person can be swapped in
    under its existing Pid. Equality covers the identity fields (cid, name),
    never the mutable membership.
    """

    def __init__(
        self,
        cid: Cid | int,
        name: GroupName | str,
        members: Iterable[Person] = (),
        reminders: Iterable[Reminder] = (),
    ) -> None:
        self.cid = cid if isinstance(cid, Cid) else Cid(cid)
        self.name = name if isinstance(name, GroupName) else GroupName(name)
        self._members: dict[Pid, Person] = {}
        self._reminders: dict[Reminder, None] = {}
        for person in members:
            existing = self._members.get(person.pid)
            if existing is not None and existing != person:
                raise InconsistentEntityError(
                    f"Person {person.pid} appears in group {self.cid} with conflicting fields."
                )
            self._members[person.pid] = person
        for reminder in reminders:
            self._reminders[reminder] = None

    @property
    def members(self) -> tuple[Person, ...]:
        """Members in enrolment order."""
        return tuple(self._members.values())

    @property
    def reminders(self) -> tuple[Reminder, ...]:
        return tuple(self._reminders)

    def has_member(self, person: Person) -> bool:
        return person.pid in self._members

    def member(self, pid: Pid) -> Person | None:
        return self._members.get(pid)

    def enrol(self, person: Person) -> bool:
        """Add person to the membership. Returns False if already a member."""
        if person.pid in self._members:
            return False
        self._members[person.pid] = person
        return True

    def expel(self, person: Person) -> bool:
        """Remove person from the membership. Returns False if not a member."""
        return self._members.pop(person.pid, None) is not None

    def replace_member(self, pid: Pid, person: Person) -> None:
        """Swap in an edited person for pid, keeping its position."""
        if pid == person.pid:
            self._members[pid] = person
            return
        self._members = {
            (person.pid if key == pid else key): (person if key == pid else value)
            for key, value in self._members.items()
        }

    def has_reminder(self, reminder: Reminder) -> bool:
        return reminder in self._reminders

    def add_reminder(self, reminder: Reminder) -> bool:
        if reminder in self._reminders:
            return False
        self._reminders[reminder] = None
        return True

    def remove_reminder(self, reminder: Reminder) -> bool:
        if reminder not in self._reminders:
            return False
        del self._reminders[reminder]
        return True

    def renamed(self, name: GroupName | str) -> "Group":
        """Return a copy of this group under a new name, same cid and contents."""
        return Group(self.cid, name, self.members, self.reminders)

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Group):
            return NotImplemented
        return self.cid == other.cid and self.name == other.name

    def __hash__(self) -> int:
        return hash(self.cid)

    def __repr__(self) -> str:
        return (
            f"Group(cid={self.cid}, name={self.name.full_name!r}, "
            f"members={len(self._members)}, reminders={len(self._reminders)})"
        )
