"""Endpoints and websocket handler for notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.application.use_cases.notifications import (
    FanoutOptions,
    count_unread_notifications,
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    list_user_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    serialize_notification,
)
from backoffice.domain.entities import (
    ADMIN_CHANNEL,
    GLOBAL_CHANNEL,
    NotificationKind,
    User,
    role_channel,
    user_channel,
)
from backoffice.domain.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from backoffice.infrastructure.database import SessionLocal, get_db
from backoffice.infrastructure.notifications import NotificationConnectionManager
from backoffice.infrastructure.repositories import NotificationRepository
from backoffice.interfaces.api.dependencies import (
    get_broadcaster,
    get_current_active_user,
    get_email_sender,
    get_fanout_options,
    require_admin,
    resolve_current_user,
)
from backoffice.interfaces.api.routes_helpers import page_count, page_offset, to_http_exception
from backoffice.interfaces.api.schemas import (
    MarkAllReadResponse,
    MyNotificationsResponse,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationRead,
    Pagination,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.post(
    "", response_model=NotificationCreateResponse, status_code=status.HTTP_201_CREATED
)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    broadcaster: BroadcastPort | None = Depends(get_broadcaster),
    send_email: EmailSender = Depends(get_email_sender),
    options: FanoutOptions = Depends(get_fanout_options),
) -> NotificationCreateResponse:
    """Send a notification to one user, a role audience or everybody."""

    try:
        report = create_notification_uc(
            db,
            title=payload.title,
            message=payload.message,
            kind=payload.type,
            recipient=payload.recipient,
            target_audience=payload.target_audience,
            action_url=payload.action_url,
            action_text=payload.action_text,
            expires_at=payload.expires_at,
            metadata=payload.metadata,
            created_by=current_user.id,
            broadcaster=broadcaster,
            send_email=send_email,
            options=options,
        )
    except ValidationError as exc:
        raise to_http_exception(exc) from exc

    first = report.result.first
    return NotificationCreateResponse(
        notification=NotificationRead.from_entity(first) if first else None,
        count=report.result.count,
        intended=report.result.intended,
        emails_sent=report.emails_sent,
    )


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    kind: NotificationKind | None = Query(None, alias="type"),
    recipient: int | None = Query(None),
    is_read: bool | None = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> NotificationListResponse:
    result = list_notifications_uc(
        db,
        kind=kind.value if kind else None,
        recipient_id=recipient,
        is_read=is_read,
        skip=page_offset(page, limit),
        limit=limit,
    )
    return NotificationListResponse(
        notifications=[NotificationRead.from_entity(n) for n in result.notifications],
        pagination=Pagination(
            page=page, limit=limit, total=result.total, pages=page_count(result.total, limit)
        ),
    )


@router.get("/me", response_model=MyNotificationsResponse)
def list_my_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    is_read: bool | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MyNotificationsResponse:
    """Return personal and broadcast notifications for the current user."""

    result = list_user_notifications(
        db,
        user=current_user,
        is_read=is_read,
        skip=page_offset(page, limit),
        limit=limit,
    )
    return MyNotificationsResponse(
        notifications=[NotificationRead.from_entity(n) for n in result.notifications],
        unread_count=result.unread_count or 0,
        pagination=Pagination(
            page=page, limit=limit, total=result.total, pages=page_count(result.total, limit)
        ),
    )


@router.put("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=mark_all_notifications_read(db, user=current_user))


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    try:
        notification = mark_notification_read(db, notification_id, user=current_user)
    except (NotFoundError, PermissionDeniedError) as exc:
        raise to_http_exception(exc) from exc
    return NotificationRead.from_entity(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    try:
        delete_notification_uc(db, notification_id)
    except NotFoundError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _channels_for(user: User) -> list[str]:
    channels = [GLOBAL_CHANNEL, role_channel(user.role.alias), user_channel(user.id)]
    if user.is_admin():
        channels.append(ADMIN_CHANNEL)
    return channels


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream ``new-notification`` events to the authenticated user.

    On connect the client receives an ``init`` message with its unread
    notifications and the unread count. Clients may send ``ping`` and
    ``{"type": "ack", "ids": [...]}`` messages.
    """

    manager: NotificationConnectionManager | None = getattr(
        websocket.app.state, "connection_manager", None
    )
    token = websocket.query_params.get("token")
    if not token or manager is None:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        pending = NotificationRepository(session).list_unread_for_user(user.id)
        unread_count = count_unread_notifications(session, user=user)
    except HTTPException:
        await websocket.close(code=1008)
        return
    except Exception:
        logger.exception("Websocket handshake failed")
        await websocket.close(code=1011)
        return
    finally:
        session.close()

    channels = _channels_for(user)
    await manager.connect(websocket, channels)
    logger.info(
        "User %s joined channels %s (%s open on %s)",
        user.id,
        ", ".join(channels),
        manager.connection_count(user_channel(user.id)),
        user_channel(user.id),
    )
    try:
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(n) for n in pending],
                "unread_count": unread_count,
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        NotificationRepository(ack_session).mark_as_read(
                            [i for i in ids if isinstance(i, int)], user_id=user.id
                        )
                    finally:
                        ack_session.close()
    except WebSocketDisconnect:
        logger.info("User %s disconnected from notifications", user.id)
    finally:
        manager.disconnect(websocket, channels)
