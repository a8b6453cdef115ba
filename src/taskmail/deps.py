"""FastAPI dependency-injection helpers."""

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from taskmail.db.store import TaskStore
from taskmail.notifier import Notifier
from taskmail.pollers import IMAPPoller, POP3Poller


def get_db_session(request: Request) -> Iterator[Session]:
    with request.app.state.db.session_factory() as session:
        yield session


def get_task_store(session: Session = Depends(get_db_session)) -> TaskStore:
    return TaskStore(session)


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_imap_poller(request: Request) -> IMAPPoller:
    return request.app.state.imap_poller


def get_pop3_poller(request: Request) -> POP3Poller:
    return request.app.state.pop3_poller
