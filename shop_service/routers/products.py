# shop_service/routers/products.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.db.database import get_db
from shop_service.db.functions import create_product, delete_product, get_all_products
from shop_service.db.schemas import DataResponse, MessageResponse, ProductResponse
from shop_service.errors import InternalError
from shop_service.media import ImageKitUploader, get_media_uploader

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductResponse, status_code=201)
async def create_new_product(
    name: str = Form(..., min_length=1),
    description: Optional[str] = Form(None),
    price: float = Form(..., ge=0, allow_inf_nan=False),
    stock: int = Form(..., ge=0),
    category: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    uploader: ImageKitUploader = Depends(get_media_uploader),
):
    try:
        image_url = None
        if image is not None and image.filename:
            content = await image.read()
            # An upload followed by a failed insert leaves the remote file behind
            image_url = await uploader.upload(content, image.filename)

        product = await create_product(
            db,
            name=name,
            description=description,
            price=price,
            stock=stock,
            category=category,
            image_url=image_url,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to create product %r", name)
        raise InternalError("Gagal menambahkan produk.")

    logger.info("Created product %s", product.id)
    return ProductResponse.model_validate(product)


@router.get("", response_model=DataResponse[ProductResponse])
async def read_products(
    search: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    try:
        products = await get_all_products(db, search)
    except Exception:
        logger.exception("Failed to list products (search=%r)", search)
        raise InternalError("Gagal mengambil data produk.")

    return DataResponse[ProductResponse](
        message="Berhasil",
        data=[ProductResponse.model_validate(p) for p in products],
    )


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_existing_product(product_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await delete_product(db, product_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to delete product %s", product_id)
        raise InternalError("Gagal menghapus produk.")

    return MessageResponse(message="Produk berhasil dihapus.")
