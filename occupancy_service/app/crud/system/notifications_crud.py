import logging
from typing import Any, Dict, Protocol

from sqlalchemy.orm import Session

from ...models.system.notifications import Notification, NotificationType, PriorityType

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, db: Session, event: str, payload: Dict[str, Any]) -> None:
        ...


# event name -> (notification type, title, priority)
NOTIFICATION_TEMPLATES = {
    "inspection_scheduled": (NotificationType.inspection, "Inspection scheduled", PriorityType.medium),
    "maintenance_required": (NotificationType.maintenance, "Maintenance required", PriorityType.high),
    "settlement_pending": (NotificationType.settlement, "Settlement pending", PriorityType.medium),
}


class DatabaseNotifier:
    """Writes advisory notifications in a session of its own.

    It runs after the lifecycle change is committed, so a failure here can
    never undo that change.
    """

    def notify(self, db: Session, event: str, payload: Dict[str, Any]) -> None:
        notification_type, title, priority = NOTIFICATION_TEMPLATES.get(
            event, (NotificationType.system, event.replace("_", " ").capitalize(), PriorityType.low))

        session = Session(bind=db.get_bind())
        try:
            session.add(Notification(
                user_id=payload.get("user_id"),
                type=notification_type,
                title=title,
                message=payload.get("message") or title,
                priority=priority,
            ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


default_notifier = DatabaseNotifier()


def send_advisory(notifier: Notifier, db: Session, event: str, payload: Dict[str, Any]) -> bool:
    """Fire-and-forget delivery. Failures are logged and swallowed."""
    try:
        notifier.notify(db, event, payload)
        return True
    except Exception:
        logger.exception("Advisory notification '%s' could not be delivered", event)
        return False


def get_notifications(db: Session, user_id=None):
    query = db.query(Notification)
    if user_id:
        query = query.filter(Notification.user_id == user_id)
    return query.order_by(Notification.posted_date.desc()).all()
