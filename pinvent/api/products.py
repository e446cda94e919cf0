from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from pinvent.core.auth import get_current_user
from pinvent.core.database import get_db
from pinvent.models.user import User
from pinvent.schemas.product import ProductFields
from pinvent.services import products as product_service
from pinvent.services.products import ImageUpload, to_response

router = APIRouter(prefix="/api/products", tags=["products"])


def product_form(
    name: Optional[str] = Form(None),
    sku: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
) -> ProductFields:
    return ProductFields(
        name=name, sku=sku, category=category,
        quantity=quantity, price=price, description=description,
    )


async def _read_image(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    if image is None or not image.filename:
        return None
    return ImageUpload(
        filename=image.filename,
        content_type=image.content_type or "",
        content=await image.read(),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    fields: ProductFields = Depends(product_form),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = product_service.create_product(db, user, fields, await _read_image(image))
    return JSONResponse(content=to_response(product), status_code=201)


@router.get("")
def list_products(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return JSONResponse(content=[to_response(p) for p in product_service.list_products(db, user)])


@router.get("/{product_id}")
def get_product(
    product_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return JSONResponse(content=to_response(product_service.get_product(db, user, product_id)))


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product_service.delete_product(db, user, product_id)
    return {"message": "Product deleted"}


@router.patch("/{product_id}")
async def update_product(
    product_id: int,
    fields: ProductFields = Depends(product_form),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = product_service.update_product(db, user, product_id, fields, await _read_image(image))
    return JSONResponse(content=to_response(product))
