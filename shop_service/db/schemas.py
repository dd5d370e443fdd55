# shop_service/db/schemas.py
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from shop_service.auth_utils import BCRYPT_MAX_BYTES

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts camelCase or snake_case on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Users

class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(CamelModel):
    email: str
    password: str


class UserSummary(CamelModel):
    id: int
    name: str
    email: str


class RegisterResponse(BaseModel):
    message: str
    user: UserSummary


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


# Products

class ProductResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    stock: int
    category: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime


# Cart

class CartItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(..., gt=0)


class CartItemResponse(CamelModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    product: ProductResponse


# Envelopes

class MessageResponse(BaseModel):
    message: str


class DataResponse(BaseModel, Generic[T]):
    message: str
    data: List[T]
