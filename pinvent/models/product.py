from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from pinvent.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    sku = Column(String(100), default="SKU")
    category = Column(String(100), nullable=False)
    quantity = Column(String(50), nullable=False)
    price = Column(String(50), nullable=False)
    description = Column(String(2000), nullable=False)
    image = Column(JSON, default=dict)  # {file_name, file_path, file_type, file_size}

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    owner = relationship("User", back_populates="products")
