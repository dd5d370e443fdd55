# shop_service/routers/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.auth_utils import hash_password, verify_password, create_access_token
from shop_service.config import Settings, get_settings
from shop_service.db.database import get_db
from shop_service.db.functions import create_user, get_user_by_email
from shop_service.db.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterResponse,
    UserCreate,
    UserSummary,
)
from shop_service.errors import InternalError, InvalidCredentialsError

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid email or password"

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    try:
        # bcrypt is CPU-bound; keep it off the event loop
        hashed_password = await run_in_threadpool(hash_password, payload.password)
        user = await create_user(
            db,
            name=payload.name,
            email=payload.email,
            hashed_password=hashed_password,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to register %r", payload.email)
        raise InternalError("Gagal mendaftarkan pengguna.")

    logger.info("Registered user %s", user.id)
    return RegisterResponse(message="User registered", user=UserSummary.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = await get_user_by_email(db, payload.email)
        if not user or not await run_in_threadpool(verify_password, payload.password, user.password):
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        token = create_access_token(
            user.id,
            user.email,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.jwt_expire_minutes,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to log in %r", payload.email)
        raise InternalError("Gagal masuk.")

    logger.info("User %s logged in", user.id)
    return LoginResponse(message="Login successful", token=token, user=UserSummary.model_validate(user))
