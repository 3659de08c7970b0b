import logging
from sqlalchemy.ext.asyncio import AsyncSession
from gradebook.models.notification import Notification

logger = logging.getLogger(__name__)

def notify(db: AsyncSession, user_id: int, kind: str, message: str) -> Notification:
    """Queue a notification on the session; the caller commits."""
    notification = Notification(user_id=user_id, kind=kind, message=message)
    db.add(notification)
    logger.info("Notification %s queued for user %s", kind, user_id)
    return notification
