from fastapi import APIRouter, Depends

from pinvent.core.auth import get_current_user
from pinvent.models.user import User
from pinvent.schemas.contact import ContactMessage
from pinvent.services.contact import contact_us
from pinvent.services.email import get_notifier

router = APIRouter(prefix="/api/contactus", tags=["contact"])


@router.post("")
def contact(
    payload: ContactMessage,
    user: User = Depends(get_current_user),
    notifier=Depends(get_notifier),
):
    contact_us(user, payload.subject, payload.message, notifier)
    return {"success": True, "message": "Email sent"}
