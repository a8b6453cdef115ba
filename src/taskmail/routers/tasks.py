"""Task endpoints, task notifications and inbox checks."""

from collections.abc import Sequence
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from taskmail.db.models import TaskItem
from taskmail.db.store import TaskStore
from taskmail.deps import get_imap_poller, get_notifier, get_pop3_poller, get_task_store
from taskmail.email.models import MessageSummary, NotificationReason, NotificationRequest
from taskmail.exceptions import TaskNotFoundError, TransportError
from taskmail.models import TaskCreate, TaskRead, TaskUpdate
from taskmail.notifier import Notifier
from taskmail.pollers import IMAPPoller, POP3Poller

logger = structlog.get_logger()

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

RecipientEmail = Annotated[str | None, Query(alias="recipientEmail")]


def _notify_after_mutation(
    notifier: Notifier,
    task: TaskItem,
    recipient: str | None,
    reason: NotificationReason,
) -> None:
    """Best-effort notification after a task was stored. Never raises TransportError."""
    if not recipient or not recipient.strip():
        logger.debug("notification_skipped", task_id=task.id, reason=reason.value)
        return
    request = NotificationRequest(
        task_title=task.title,
        recipient_address=recipient.strip(),
        reason=reason.value,
    )
    try:
        notifier.notify(request)
    except TransportError as e:
        # The task change is already committed and stays that way
        logger.warning("notification_failed", task_id=task.id, reason=reason.value, error=str(e))


# Static paths are declared before /{task_id} so they are matched first.


@router.post("/send-email", response_class=Response)
def send_task_email(
    store: Annotated[TaskStore, Depends(get_task_store)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    task_id: Annotated[int, Query(alias="taskId")],
    recipient_email: Annotated[str, Query(alias="recipientEmail", min_length=1)],
) -> Response:
    """Send a reminder email for an existing task."""
    recipient_email = recipient_email.strip()
    if not recipient_email:
        raise HTTPException(
            status_code=422,
            detail="recipientEmail must not be blank",
        )
    try:
        task = store.get(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    try:
        notifier.notify(
            NotificationRequest(
                task_title=task.title,
                recipient_address=recipient_email,
                reason=NotificationReason.REMINDER.value,
            )
        )
    except TransportError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return Response(
        content=f"Email sent to {recipient_email} for task '{task.title}'",
        media_type="text/plain",
    )


@router.get("/check-inbox-imap", response_model=list[MessageSummary])
def check_inbox_imap(
    poller: Annotated[IMAPPoller, Depends(get_imap_poller)],
) -> list[MessageSummary]:
    """List the first messages of the inbox over IMAP."""
    try:
        return poller.poll()
    except TransportError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/check-inbox-pop3", response_model=list[MessageSummary])
def check_inbox_pop3(
    poller: Annotated[POP3Poller, Depends(get_pop3_poller)],
) -> list[MessageSummary]:
    """List the first messages of the maildrop over POP3."""
    try:
        return poller.poll()
    except TransportError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("", response_model=list[TaskRead])
def list_tasks(store: Annotated[TaskStore, Depends(get_task_store)]) -> Sequence[TaskItem]:
    return store.list()


@router.get("/{task_id}", response_model=TaskRead)
def get_task(task_id: int, store: Annotated[TaskStore, Depends(get_task_store)]) -> TaskItem:
    try:
        return store.get(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    body: TaskCreate,
    request: Request,
    response: Response,
    store: Annotated[TaskStore, Depends(get_task_store)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    recipient_email: RecipientEmail = None,
) -> TaskItem:
    """Create a task and optionally notify a recipient."""
    task = store.create(body)
    logger.info("task_created", task_id=task.id)
    response.headers["Location"] = str(request.url_for("get_task", task_id=task.id))
    _notify_after_mutation(notifier, task, recipient_email, NotificationReason.CREATED)
    return task


@router.put("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_task(
    task_id: int,
    body: TaskUpdate,
    store: Annotated[TaskStore, Depends(get_task_store)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    recipient_email: RecipientEmail = None,
) -> Response:
    """Replace a task and optionally notify a recipient."""
    if body.id is not None and body.id != task_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Task id in body does not match the URL",
        )
    try:
        task = store.update(task_id, body)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    logger.info("task_updated", task_id=task.id)
    _notify_after_mutation(notifier, task, recipient_email, NotificationReason.UPDATED)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_task(task_id: int, store: Annotated[TaskStore, Depends(get_task_store)]) -> Response:
    try:
        store.delete(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    logger.info("task_deleted", task_id=task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
