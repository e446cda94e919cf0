from typing import Optional
from pydantic import BaseModel


class ProductFields(BaseModel):
    """Form fields shared by create and update (multipart, not JSON)."""
    name: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[str] = None
    price: Optional[str] = None
    description: Optional[str] = None
