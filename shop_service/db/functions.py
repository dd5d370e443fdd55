# shop_service/db/functions.py
import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from shop_service.db.models import User, Product, Cart, CartItem
from shop_service.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Produk tidak ditemukan."
CART_NOT_FOUND = "Keranjang tidak ditemukan."
CART_ITEM_NOT_FOUND = "Produk tidak ada di keranjang."
EMAIL_IN_USE = "Email already in use"


def _insert_for(db: AsyncSession):
    """Dialect-specific insert() so that ON CONFLICT clauses are available."""
    dialect = db.bind.dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Cart upserts are not supported on the {dialect!r} database dialect")


# Users

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, name: str, email: str, hashed_password: str) -> User:
    if await get_user_by_email(db, email):
        raise ConflictError(EMAIL_IN_USE)

    db_user = User(name=name, email=email, password=hashed_password)
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        # Another request registered the same email in between
        await db.rollback()
        raise ConflictError(EMAIL_IN_USE)
    await db.refresh(db_user)
    return db_user


# Products

async def create_product(
    db: AsyncSession,
    name: str,
    description: Optional[str],
    price: float,
    stock: int,
    category: Optional[str],
    image_url: Optional[str] = None,
) -> Product:
    new_product = Product(
        name=name,
        description=description,
        price=price,
        stock=stock,
        category=category,
        image_url=image_url,
    )
    db.add(new_product)
    await db.commit()
    await db.refresh(new_product)
    return new_product


async def get_all_products(db: AsyncSession, search: Optional[str] = None) -> List[Product]:
    """All products, newest first; ``search`` filters on a name substring."""
    query = select(Product)
    if search:
        query = query.filter(Product.name.contains(search, autoescape=True))
    result = await db.execute(query.order_by(Product.created_at.desc(), Product.id.desc()))
    return list(result.scalars().all())


async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[Product]:
    result = await db.execute(select(Product).filter(Product.id == product_id))
    return result.scalar_one_or_none()


async def delete_product(db: AsyncSession, product_id: int) -> Product:
    """Delete a product together with every cart line that references it."""
    product = await get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError(PRODUCT_NOT_FOUND)

    # Cart lines go first; both deletes are committed together
    removed = await db.execute(delete(CartItem).where(CartItem.product_id == product_id))
    await db.delete(product)
    await db.commit()
    logger.info("Deleted product %s and %s cart item(s)", product_id, removed.rowcount)
    return product


# Cart

async def get_cart_by_user_id(db: AsyncSession, user_id: int) -> Optional[Cart]:
    result = await db.execute(select(Cart).filter(Cart.user_id == user_id))
    return result.scalar_one_or_none()


async def add_product_to_cart(db: AsyncSession, user_id: int, product_id: int, quantity: int) -> CartItem:
    """Add ``quantity`` of a product to the user's cart.

    The cart is created on first use. Adding a product that is already in
    the cart increments the existing line. Both steps are single upserts
    against the unique constraints, so concurrent requests from one user
    can neither create a second cart nor a duplicate line.
    """
    if not await get_product_by_id(db, product_id):
        raise NotFoundError(PRODUCT_NOT_FOUND)

    insert = _insert_for(db)

    await db.execute(
        insert(Cart).values(user_id=user_id).on_conflict_do_nothing(index_elements=["user_id"])
    )
    cart = await get_cart_by_user_id(db, user_id)

    stmt = insert(CartItem).values(cart_id=cart.id, product_id=product_id, quantity=quantity)
    stmt = stmt.on_conflict_do_update(
        index_elements=["cart_id", "product_id"],
        set_={"quantity": CartItem.quantity + stmt.excluded.quantity},
    )
    await db.execute(stmt)
    await db.commit()

    result = await db.execute(
        select(CartItem).filter(CartItem.cart_id == cart.id, CartItem.product_id == product_id)
    )
    return result.scalar_one()


async def get_cart_items(db: AsyncSession, user_id: int) -> List[CartItem]:
    """Cart lines of the user with their products loaded; empty if no cart yet."""
    result = await db.execute(
        select(CartItem)
        .join(Cart, CartItem.cart_id == Cart.id)
        .filter(Cart.user_id == user_id)
        .options(selectinload(CartItem.product))
        .order_by(CartItem.id)
    )
    return list(result.scalars().all())


async def remove_item_from_cart(db: AsyncSession, user_id: int, cart_item_id: int) -> CartItem:
    """Remove a cart line by its own id, only from the user's own cart."""
    cart = await get_cart_by_user_id(db, user_id)
    if not cart:
        raise NotFoundError(CART_NOT_FOUND)

    result = await db.execute(
        select(CartItem).filter(CartItem.id == cart_item_id, CartItem.cart_id == cart.id)
    )
    cart_item = result.scalar_one_or_none()
    if not cart_item:
        raise NotFoundError(CART_ITEM_NOT_FOUND)

    await db.delete(cart_item)
    await db.commit()
    return cart_item
