"""Application layer: model with filtered views, commands, ports and DTOs. Depends only on domain."""

from epoch.application.commands import (
    AddGroupCommand,
    AddPersonCommand,
    AddReminderCommand,
    ClearCommand,
    Command,
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
    RemindersDueCommand,
    RenameGroupCommand,
)
from epoch.application.dto import CommandError, CommandResult
from epoch.application.executor import CommandExecutor, load_address_book_or_empty
from epoch.application.model import Model
from epoch.application.ports import AddressBookStorage
from epoch.application.predicates import (
    GroupHasMember,
    NameContainsKeywords,
    ReminderDueBefore,
)
from epoch.application.views import FilteredView, show_all

__all__ = [
    "AddGroupCommand",
    "AddPersonCommand",
    "AddReminderCommand",
    "AddressBookStorage",
    "ClearCommand",
    "Command",
    "CommandError",
    "CommandExecutor",
    "CommandResult",
    "DeleteGroupCommand",
    "DeletePersonCommand",
    "DeleteReminderCommand",
    "EditPersonCommand",
    "EnrolCommand",
    "ExitCommand",
    "ExpelCommand",
    "FilteredView",
    "FindGroupsOfPersonCommand",
    "FindPersonCommand",
    "GroupHasMember",
    "ListCommand",
    "Model",
    "NameContainsKeywords",
    "ReminderDueBefore",
    "RemindersDueCommand",
    "RenameGroupCommand",
    "load_address_book_or_empty",
    "show_all",
]
