from typing import Optional
from pydantic import BaseModel


class ContactMessage(BaseModel):
    subject: Optional[str] = None
    message: Optional[str] = None
