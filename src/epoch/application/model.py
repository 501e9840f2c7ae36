"""In-memory model: the AddressBook plus one live filtered view per collection."""

import logging

from epoch.application.views import FilteredView, Predicate, show_all
from epoch.domain import AddressBook, Cid, Group, Person, Pid, Reminder

logger = logging.getLogger(__name__)


class Model:
    """What commands operate on. Registry mutations go through here so views stay in step."""

    def __init__(self, address_book: AddressBook | None = None) -> None:
        self._address_book = AddressBook()
        if address_book is not None:
            self._address_book.reset_data(address_book)
        logger.debug("Initializing model with %r", self._address_book)
        self.filtered_persons: FilteredView[Person] = FilteredView(self._address_book.persons)
        self.filtered_groups: FilteredView[Group] = FilteredView(self._address_book.groups)
        self.filtered_reminders: FilteredView[Reminder] = FilteredView(
            self._address_book.reminders
        )

    @property
    def address_book(self) -> AddressBook:
        return self._address_book

    def reset_address_book(self, address_book: AddressBook) -> None:
        """Replace all data (reset or import). Views stay bound to the same collections."""
        self._address_book.reset_data(address_book)

    # --- persons ---

    def has_person(self, person: Person) -> bool:
        return self._address_book.has_person(person)

    def add_person(self, person: Person) -> None:
        self._address_book.add_person(person)
        self.filtered_persons.update(show_all)

    def set_person(self, target: Person, edited: Person) -> None:
        self._address_book.set_person(target, edited)

    def delete_person(self, target: Person) -> None:
        self._address_book.remove_person(target)

    def find_person_from_pid(self, pid: Pid | int | str) -> Person:
        return self._address_book.find_person_from_pid(pid)

    # --- groups ---

    def has_group(self, group: Group) -> bool:
        return self._address_book.has_group(group)

    def add_group(self, group: Group) -> None:
        self._address_book.add_group(group)
        self.filtered_groups.update(show_all)

    def set_group(self, target: Group, edited: Group) -> None:
        self._address_book.set_group(target, edited)

    def delete_group(self, target: Group) -> None:
        self._address_book.remove_group(target)

    def find_group_from_cid(self, cid: Cid | int | str) -> Group:
        return self._address_book.find_group_from_cid(cid)

    def enrol(self, group: Group, person: Person) -> bool:
        return self._address_book.enrol(group, person)

    def expel(self, group: Group, person: Person) -> bool:
        return self._address_book.expel(group, person)

    # --- reminders ---

    def has_reminder(self, reminder: Reminder) -> bool:
        return self._address_book.has_reminder(reminder)

    def add_reminder(self, owner: Group, reminder: Reminder) -> None:
        self._address_book.add_reminder(owner, reminder)
        self.filtered_reminders.update(show_all)

    def delete_reminder(self, target: Reminder) -> None:
        self._address_book.remove_reminder(target)

    # --- views ---

    def update_filtered_persons(self, predicate: Predicate) -> None:
        self.filtered_persons.update(predicate)

    def update_filtered_groups(self, predicate: Predicate) -> None:
        self.filtered_groups.update(predicate)

    def update_filtered_reminders(self, predicate: Predicate) -> None:
        self.filtered_reminders.update(predicate)

    def reset_all_views(self) -> None:
        """Show everything in every view."""
        self.filtered_persons.reset()
        self.filtered_groups.reset()
        self.filtered_reminders.reset()
