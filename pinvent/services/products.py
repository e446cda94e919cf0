import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from pinvent.core.config import settings
from pinvent.core.errors import InternalError, NotFoundError, UnauthorizedError, ValidationError
from pinvent.models.product import Product
from pinvent.models.user import User
from pinvent.schemas.product import ProductFields
from pinvent.services.image_host import ALLOWED_IMAGE_TYPES, ImageUploadError, store_image

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "quantity", "category", "price", "description")


@dataclass
class ImageUpload:
    filename: str
    content_type: str
    content: bytes


def to_response(p: Product) -> dict:
    return {
        "id": p.id,
        "user_id": p.user_id,
        "name": p.name,
        "sku": p.sku or "",
        "category": p.category,
        "quantity": p.quantity,
        "price": p.price,
        "description": p.description,
        "image": p.image or {},
        "created_at": p.created_at.isoformat() if p.created_at else "",
        "updated_at": p.updated_at.isoformat() if p.updated_at else "",
    }


def _upload(image: ImageUpload) -> dict:
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only .png, .jpg and .jpeg images are allowed")
    if len(image.content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise ValidationError(f"Image too large (max {settings.MAX_UPLOAD_SIZE_MB}MB)")
    try:
        return store_image(image.content, image.filename, image.content_type)
    except ImageUploadError as e:
        raise InternalError("Image could not be uploaded") from e


def _owned_product(db: Session, user: User, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    if product.user_id != user.id:
        raise UnauthorizedError("User not authorized")
    return product


def create_product(
    db: Session,
    user: User,
    fields: ProductFields,
    image: Optional[ImageUpload] = None,
) -> Product:
    if any(not getattr(fields, f) for f in REQUIRED_FIELDS):
        raise ValidationError("Please fill in all fields")

    file_data = _upload(image) if image else {}

    product = Product(
        user_id=user.id,
        name=fields.name,
        category=fields.category,
        quantity=fields.quantity,
        price=fields.price,
        description=fields.description,
        image=file_data,
    )
    if fields.sku:
        product.sku = fields.sku
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("User id=%d created product id=%d", user.id, product.id)
    return product


def list_products(db: Session, user: User) -> list[Product]:
    return (
        db.query(Product)
        .filter(Product.user_id == user.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )


def get_product(db: Session, user: User, product_id: int) -> Product:
    return _owned_product(db, user, product_id)


def delete_product(db: Session, user: User, product_id: int) -> None:
    product = _owned_product(db, user, product_id)
    db.delete(product)
    db.commit()
    logger.info("User id=%d deleted product id=%d", user.id, product_id)


def update_product(
    db: Session,
    user: User,
    product_id: int,
    fields: ProductFields,
    image: Optional[ImageUpload] = None,
) -> Product:
    product = _owned_product(db, user, product_id)

    # sku is fixed at creation
    for name in ("name", "category", "quantity", "price", "description"):
        value = getattr(fields, name)
        if value is not None:
            setattr(product, name, value)

    # Keep the current image unless a new one came with the request
    if image:
        product.image = _upload(image)

    db.commit()
    db.refresh(product)
    return product
