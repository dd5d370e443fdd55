# shop_service/routers/cart.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.auth_utils import TokenPayload
from shop_service.db.database import get_db
from shop_service.db.functions import add_product_to_cart, get_cart_items, remove_item_from_cart
from shop_service.db.schemas import CartItemCreate, CartItemResponse, DataResponse, MessageResponse
from shop_service.dependencies import get_current_user
from shop_service.errors import InternalError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/add", response_model=MessageResponse)
async def add_to_cart(
    payload: CartItemCreate,
    user: TokenPayload = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        item = await add_product_to_cart(db, user.id, payload.product_id, payload.quantity)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to add product %s to cart of user %s", payload.product_id, user.id)
        raise InternalError("Gagal menambahkan produk ke keranjang.")

    logger.info("User %s cart: product %s now x%s", user.id, item.product_id, item.quantity)
    return MessageResponse(message="Produk berhasil ditambahkan ke keranjang.")


@router.get("", response_model=DataResponse[CartItemResponse])
async def get_cart(
    user: TokenPayload = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        items = await get_cart_items(db, user.id)
    except Exception:
        logger.exception("Failed to load cart of user %s", user.id)
        raise InternalError("Gagal mengambil keranjang.")

    return DataResponse[CartItemResponse](
        message="Berhasil",
        data=[CartItemResponse.model_validate(item) for item in items],
    )


# The path value is the CartItem id, not a product id; existing clients rely on it
@router.delete("/remove/{productId}", response_model=MessageResponse)
async def remove_from_cart(
    productId: int,
    user: TokenPayload = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        await remove_item_from_cart(db, user.id, productId)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to remove cart item %s for user %s", productId, user.id)
        raise InternalError("Gagal menghapus produk dari keranjang.")

    return MessageResponse(message="Produk berhasil dihapus dari keranjang.")
