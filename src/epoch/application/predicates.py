"""Predicates for the filtered views. Plain callables, comparable for tests."""

from dataclasses import dataclass
from datetime import datetime

from epoch.domain import Group, Person, Pid, Reminder, as_utc


@dataclass(frozen=True)
class NameContainsKeywords:
    """Matches a person or group whose name contains any keyword as a whole word (case-insensitive)."""

    keywords: tuple[str, ...]

    def __post_init__(self):
        cleaned = tuple(k.strip().lower() for k in self.keywords if k and k.strip())
        object.__setattr__(self, "keywords", cleaned)

    def __call__(self, entity: Person | Group) -> bool:
        name = entity.name if isinstance(entity, Person) else entity.name.full_name
        words = name.lower().split()
        return any(keyword in words for keyword in self.keywords)


@dataclass(frozen=True)
class GroupHasMember:
    """Matches groups whose membership includes the person with this pid."""

    pid: Pid

    def __call__(self, group: Group) -> bool:
        return group.member(self.pid) is not None


@dataclass(frozen=True)
class ReminderDueBefore:
    """Matches reminders due strictly before the given moment (naive means UTC)."""

    moment: datetime

    def __post_init__(self):
        object.__setattr__(self, "moment", as_utc(self.moment))

    def __call__(self, reminder: Reminder) -> bool:
        return reminder.due < self.moment
