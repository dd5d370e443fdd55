# shop_service/db/init_db.py
from shop_service.db.database import engine, Base
from shop_service.db.models import User, Product, Cart, CartItem  # noqa: F401  registers tables


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
