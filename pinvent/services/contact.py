import logging
from typing import Optional

from pinvent.core.errors import InternalError, ValidationError
from pinvent.models.user import User
from pinvent.services.email import EmailDeliveryError, default_sender

logger = logging.getLogger(__name__)


def contact_us(user: User, subject: Optional[str], message: Optional[str], notifier) -> None:
    """Forward a user's message to the support mailbox, replying to the user."""
    if not subject or not message:
        raise ValidationError("Please add subject and message")

    support = default_sender()
    try:
        notifier(subject, message, support, support, reply_to=user.email)
    except EmailDeliveryError as e:
        logger.error("Contact email from user id=%d not sent: %s", user.id, e)
        raise InternalError("Email not sent, please try again") from e
