"""Denormalized document form of the AddressBook.

Layout: {"groups": [{"cid", "name", "members": [person...], "reminders": [reminder...]}]}.
Every group embeds a full copy of each member and reminder; there is no
top-level person list, so a person in no group is not representable.

Loading runs in two passes: all embedded records are parsed and reconciled by
identity first (a pid seen with different fields is rejected), then groups are
built from the canonical instances. Nothing is registered until every record
has validated, so a failed load never leaves a partial AddressBook.
"""

from datetime import datetime
from typing import Any

from epoch.domain import (
    NAME_CONSTRAINTS,
    AddressBook,
    Cid,
    Group,
    GroupName,
    InconsistentEntityError,
    MalformedDataError,
    Person,
    Pid,
    Reminder,
    ValidationError,
    is_valid_name,
)

MISSING_FIELD_MESSAGE_FORMAT = "{entity}'s {field} field is missing!"

_PERSON_FIELDS = ("pid", "name", "phone", "email", "address")
_REMINDER_FIELDS = ("title", "due")


def _datetime_to_iso(dt: datetime) -> str:
    return dt.isoformat()


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _require_fields(entity: str, record: Any, names: tuple[str, ...]) -> None:
    if not isinstance(record, dict):
        raise MalformedDataError(f"{entity} record must be an object, got {type(record).__name__}.")
    for name in names:
        if record.get(name) is None:
            raise MalformedDataError(
                MISSING_FIELD_MESSAGE_FORMAT.format(entity=entity, field=name)
            )


# --- save ---


def person_to_record(person: Person) -> dict:
    return {
        "pid": person.pid.value,
        "name": person.name,
        "phone": person.phone,
        "email": person.email,
        "address": person.address,
        "tags": sorted(person.tags),
    }


def reminder_to_record(reminder: Reminder) -> dict:
    return {"title": reminder.title, "due": _datetime_to_iso(reminder.due)}


def group_to_record(group: Group) -> dict:
    return {
        "cid": group.cid.value,
        "name": group.name.full_name,
        "members": [person_to_record(p) for p in group.members],
        "reminders": [reminder_to_record(r) for r in group.reminders],
    }


def to_document(address_book: AddressBook) -> dict:
    """Emit every group with full copies of its members and reminders."""
    return {"groups": [group_to_record(g) for g in address_book.groups]}


def unrepresentable_persons(address_book: AddressBook) -> list[Person]:
    """Persons that belong to no group and will therefore not survive a save."""
    return [p for p in address_book.persons if not address_book.groups_of(p)]


# --- load ---


def person_from_record(record: Any) -> Person:
    _require_fields("Person", record, _PERSON_FIELDS)
    tags = record.get("tags") or []
    if not isinstance(tags, list):
        raise MalformedDataError("Person's tags field must be a list.")
    try:
        return Person(
            pid=Pid(record["pid"]),
            name=record["name"],
            phone=record["phone"],
            email=record["email"],
            address=record["address"],
            tags=frozenset(tags),
        )
    except (ValidationError, TypeError) as e:
        raise MalformedDataError(f"Invalid person record {record.get('pid')!r}: {e}") from e


def reminder_from_record(record: Any) -> Reminder:
    _require_fields("Reminder", record, _REMINDER_FIELDS)
    try:
        due = _iso_to_datetime(record["due"])
    except (TypeError, ValueError, AttributeError) as e:
        raise MalformedDataError(f"Reminder's due field is not a valid date: {record['due']!r}") from e
    try:
        return Reminder(title=record["title"], due=due)
    except ValidationError as e:
        raise MalformedDataError(f"Invalid reminder record: {e}") from e


def _group_name_from_record(record: dict) -> GroupName:
    name = record["name"]
    if not isinstance(name, str) or not is_valid_name(name):
        raise MalformedDataError(NAME_CONSTRAINTS)
    return GroupName(name)


def _cid_from_record(record: dict) -> Cid | None:
    if record.get("cid") is None:
        return None
    try:
        return Cid(record["cid"])
    except ValidationError as e:
        raise MalformedDataError(f"Invalid group record: {e}") from e


def from_document(document: Any) -> AddressBook:
    """Rebuild the canonical AddressBook from its denormalized document.

    Raises MalformedDataError for a missing or invalid field, and
    InconsistentEntityError when one pid is embedded with different fields.
    """
    if not isinstance(document, dict):
        raise MalformedDataError("Address book document must be an object.")
    group_records = document.get("groups", [])
    if not isinstance(group_records, list):
        raise MalformedDataError("Address book's groups field must be a list.")

    # Pass 1: parse everything and reconcile duplicated copies by identity.
    persons: dict[Pid, Person] = {}
    reminders: dict[Reminder, Reminder] = {}
    parsed: list[tuple[Cid | None, GroupName, list[Pid], list[Reminder]]] = []
    for record in group_records:
        _require_fields("Group", record, ("name",))
        name = _group_name_from_record(record)
        cid = _cid_from_record(record)
        member_records = record.get("members") or []
        reminder_records = record.get("reminders") or []
        if not isinstance(member_records, list) or not isinstance(reminder_records, list):
            raise MalformedDataError(f"Group {name}'s members and reminders must be lists.")
        member_pids: list[Pid] = []
        for member_record in member_records:
            person = person_from_record(member_record)
            seen = persons.setdefault(person.pid, person)
            if seen != person:
                raise InconsistentEntityError(
                    f"Person {person.pid} is stored with conflicting fields "
                    f"({seen.name!r} vs {person.name!r})."
                )
            member_pids.append(person.pid)
        group_reminders = [
            reminders.setdefault(r, r) for r in map(reminder_from_record, reminder_records)
        ]
        parsed.append((cid, name, member_pids, group_reminders))

    explicit = [cid for cid, _, _, _ in parsed if cid is not None]
    if len(set(explicit)) != len(explicit):
        raise MalformedDataError("Address book contains duplicate group ids.")
    next_cid = max((c.value for c in explicit), default=0) + 1

    # Pass 2: attach canonical instances to each group.
    address_book = AddressBook()
    for person in persons.values():
        address_book.add_person(person)
    for cid, name, member_pids, group_reminders in parsed:
        if cid is None:
            cid = Cid(next_cid)
            next_cid += 1
        members = [persons[pid] for pid in member_pids]
        address_book.add_group(Group(cid, name, members, group_reminders))
    return address_book
