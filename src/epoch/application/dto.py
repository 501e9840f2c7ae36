"""Result types passed between the command layer and its callers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Feedback for the user after a command, plus whether the app should exit."""

    feedback: str
    exit: bool = False


class CommandError(Exception):
    """A command could not be carried out. The message is user-facing."""

    def __init__(self, message: str, *, kind: str = "invalid") -> None:
        super().__init__(message)
        self.message = message
        # One of: invalid, not_found, duplicate, conflict, storage.
        self.kind = kind
