"""
FastAPI backend: REST API over the ePoch address book.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TypeVar

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from epoch.application import (
    AddGroupCommand,
    AddPersonCommand,
    AddReminderCommand,
    ClearCommand,
    Command,
    CommandError,
    CommandExecutor,
    CommandResult,
    DeleteGroupCommand,
    DeletePersonCommand,
    EditPersonCommand,
    EnrolCommand,
    ExpelCommand,
    FindGroupsOfPersonCommand,
    FindPersonCommand,
    ListCommand,
    Model,
    RenameGroupCommand,
    load_address_book_or_empty,
)
from epoch.config import load_settings
from epoch.domain import Group, Person, Reminder
from epoch.infrastructure import JsonAddressBookStorage, phone_normalizer

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=os.environ.get("EPOCH_LOG_LEVEL", "INFO").strip().upper() or "INFO",
)
logger = logging.getLogger(__name__)

T = TypeVar("T")

_STATUS_BY_KIND = {
    "invalid": 400,
    "not_found": 404,
    "duplicate": 409,
    "conflict": 409,
    "storage": 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    storage = JsonAddressBookStorage(settings.data_path)
    model = Model(load_address_book_or_empty(storage))
    app.state.settings = settings
    app.state.executor = CommandExecutor(model, storage)
    logger.info("Address book data file: %s", settings.data_path)
    yield


app = FastAPI(title="ePoch API", lifespan=lifespan)


def _executor(request: Request) -> CommandExecutor:
    return request.app.state.executor


def _http_error(e: CommandError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_KIND.get(e.kind, 400), detail=e.message)


def _run(request: Request, command: Command) -> CommandResult:
    try:
        return _executor(request).execute(command)
    except CommandError as e:
        raise _http_error(e)


def _run_and_read(request: Request, command: Command, read: Callable[[Model], T]) -> T:
    try:
        return _executor(request).execute_and_read(command, read)
    except CommandError as e:
        raise _http_error(e)


# --- response shapes ---


class PersonItem(BaseModel):
    pid: int
    name: str
    phone: str
    email: str
    address: str
    tags: list[str]


class ReminderItem(BaseModel):
    title: str
    due: str


class GroupItem(BaseModel):
    cid: int
    name: str
    members: list[int]
    reminders: list[ReminderItem]


def _person_item(person: Person) -> PersonItem:
    return PersonItem(
        pid=person.pid.value,
        name=person.name,
        phone=person.phone,
        email=person.email,
        address=person.address,
        tags=sorted(person.tags),
    )


def _reminder_item(reminder: Reminder) -> ReminderItem:
    return ReminderItem(title=reminder.title, due=reminder.due.isoformat())


def _group_item(group: Group) -> GroupItem:
    return GroupItem(
        cid=group.cid.value,
        name=group.name.full_name,
        members=[p.pid.value for p in group.members],
        reminders=[_reminder_item(r) for r in group.reminders],
    )


def _feedback(result: CommandResult, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content={"feedback": result.feedback}, status_code=status_code)


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: views ---


@app.get("/persons")
def list_persons(request: Request):
    return _executor(request).read(lambda m: [_person_item(p) for p in m.filtered_persons])


@app.get("/groups")
def list_groups(request: Request):
    return _executor(request).read(lambda m: [_group_item(g) for g in m.filtered_groups])


@app.get("/reminders")
def list_reminders(request: Request):
    return _executor(request).read(lambda m: [_reminder_item(r) for r in m.filtered_reminders])


@app.post("/list")
def show_everything(request: Request):
    return _feedback(_run(request, ListCommand()))


@app.post("/clear")
def clear(request: Request):
    return _feedback(_run(request, ClearCommand()))


# --- REST: persons ---


class CreatePersonBody(BaseModel):
    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    tags: list[str] = Field(default_factory=list)


class EditPersonBody(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    tags: list[str] | None = None


@app.post("/persons")
def create_person(body: CreatePersonBody, request: Request):
    settings = request.app.state.settings
    command = AddPersonCommand(
        name=body.name,
        phone=body.phone,
        email=body.email,
        address=body.address,
        tags=tuple(body.tags),
        phone_normalizer=phone_normalizer(settings.default_region),
    )
    return _feedback(_run(request, command), status_code=201)


@app.get("/persons/find")
def find_persons(q: str, request: Request):
    return _run_and_read(
        request,
        FindPersonCommand(tuple(q.split())),
        lambda m: [_person_item(p) for p in m.filtered_persons],
    )


@app.patch("/persons/{pid}")
def edit_person(pid: int, body: EditPersonBody, request: Request):
    command = EditPersonCommand(
        pid=pid,
        name=body.name,
        phone=body.phone,
        email=body.email,
        address=body.address,
        tags=tuple(body.tags) if body.tags is not None else None,
    )
    return _feedback(_run(request, command))


@app.delete("/persons/{pid}")
def delete_person(pid: int, request: Request):
    return _feedback(_run(request, DeletePersonCommand(pid)))


@app.get("/persons/{pid}/groups")
def groups_of_person(pid: int, request: Request):
    return _run_and_read(
        request,
        FindGroupsOfPersonCommand(pid),
        lambda m: [_group_item(g) for g in m.filtered_groups],
    )


# --- REST: groups ---


class GroupBody(BaseModel):
    name: str


class ReminderBody(BaseModel):
    title: str
    due: datetime


@app.post("/groups")
def create_group(body: GroupBody, request: Request):
    return _feedback(_run(request, AddGroupCommand(body.name)), status_code=201)


@app.patch("/groups/{cid}")
def rename_group(cid: int, body: GroupBody, request: Request):
    return _feedback(_run(request, RenameGroupCommand(cid, body.name)))


@app.delete("/groups/{cid}")
def delete_group(cid: int, request: Request):
    return _feedback(_run(request, DeleteGroupCommand(cid)))


@app.post("/groups/{cid}/members/{pid}")
def enrol(cid: int, pid: int, request: Request):
    return _feedback(_run(request, EnrolCommand(cid, pid)))


@app.delete("/groups/{cid}/members/{pid}")
def expel(cid: int, pid: int, request: Request):
    return _feedback(_run(request, ExpelCommand(cid, pid)))


@app.post("/groups/{cid}/reminders")
def add_reminder(cid: int, body: ReminderBody, request: Request):
    command = AddReminderCommand(cid, body.title, body.due)
    return _feedback(_run(request, command), status_code=201)
