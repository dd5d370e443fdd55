# shop_service/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from shop_service.config import Settings, get_settings
from shop_service.db.init_db import init_db
from shop_service.errors import register_exception_handlers
from shop_service.logging_config import configure_logging
from shop_service.routers import auth, cart, products

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    await init_db()
    logger.info("Database tables ready")
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Shop Service", lifespan=lifespan)
    # Every Depends(get_settings) in this app resolves to the settings given here
    app.dependency_overrides[get_settings] = lambda: settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(cart.router)

    @app.get("/test", response_class=PlainTextResponse)
    async def connection_test():
        return "Connect Success"

    @app.get("/")
    async def health_check():
        """Health check endpoint."""
        return {"status": "shop_service running"}

    return app


app = create_app()


def run():
    settings = get_settings()
    logger.info("Server running on http://%s:%s", settings.host, settings.port)
    uvicorn.run("shop_service.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
