# tests/test_products.py
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from shop_service.db.database import get_db
from shop_service.db.models import CartItem, Product
from shop_service.main import app
from shop_service.media import MediaUploadError
from tests.helpers import FAKE_IMAGE_URL, create_product, register_and_login


@pytest.mark.asyncio
class TestCreateProduct:

    async def test_create_without_image(self, client, mock_uploader):
        product = await create_product(client, price="199.5", stock="3")

        assert product["name"] == "Sepatu Lari"
        assert product["price"] == 199.5
        assert product["stock"] == 3
        assert product["category"] == "shoes"
        assert product["imageUrl"] is None
        assert product["createdAt"]
        mock_uploader.upload.assert_not_awaited()

    async def test_create_with_image_stores_uploaded_url(self, client, mock_uploader):
        product = await create_product(client, files={"image": ("shoe.png", b"\x89PNG-bytes", "image/png")})

        assert product["imageUrl"] == FAKE_IMAGE_URL
        mock_uploader.upload.assert_awaited_once_with(b"\x89PNG-bytes", "shoe.png")

    @pytest.mark.parametrize("field, value", [("price", "abc"), ("stock", "lots"), ("price", "-1"), ("stock", "2.5")])
    async def test_invalid_numbers_are_rejected(self, client, session_factory, field, value):
        data = {"name": "Kaos", "description": "d", "price": "10", "stock": "1", "category": "c"}
        data[field] = value

        response = await client.post("/products", data=data)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        async with session_factory() as session:
            assert await session.scalar(select(func.count()).select_from(Product)) == 0

    async def test_upload_failure_is_internal_error(self, client, session_factory, mock_uploader):
        mock_uploader.upload.side_effect = MediaUploadError("ImageKit down")
        data = {"name": "Kaos", "description": "d", "price": "10", "stock": "1", "category": "c"}

        response = await client.post("/products", data=data, files={"image": ("a.png", b"x", "image/png")})

        assert response.status_code == 500
        assert response.json() == {"message": "Gagal menambahkan produk.", "code": "internal_error"}
        async with session_factory() as session:
            assert await session.scalar(select(func.count()).select_from(Product)) == 0


@pytest.mark.asyncio
class TestListProducts:

    async def test_list_is_newest_first(self, client):
        for name in ("Sepatu Lari", "Kaos Polos", "Sepatu Bola"):
            await create_product(client, name=name)

        response = await client.get("/products")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Berhasil"
        assert [p["name"] for p in body["data"]] == ["Sepatu Bola", "Kaos Polos", "Sepatu Lari"]

    async def test_search_filters_on_name(self, client):
        for name in ("Sepatu Lari", "Kaos Polos", "Sepatu Bola"):
            await create_product(client, name=name)

        response = await client.get("/products", params={"search": "Sepatu"})

        assert [p["name"] for p in response.json()["data"]] == ["Sepatu Bola", "Sepatu Lari"]

    async def test_search_treats_wildcards_literally(self, client):
        await create_product(client, name="Diskon 50% Kaos")
        await create_product(client, name="Kaos Polos")

        response = await client.get("/products", params={"search": "50%"})

        assert [p["name"] for p in response.json()["data"]] == ["Diskon 50% Kaos"]

    async def test_empty_search_returns_everything(self, client):
        await create_product(client, name="Sepatu Lari")
        await create_product(client, name="Kaos Polos")

        response = await client.get("/products", params={"search": ""})

        assert len(response.json()["data"]) == 2


@pytest.mark.asyncio
class TestDeleteProduct:

    async def test_delete_unknown_product(self, client):
        response = await client.delete("/products/999")

        assert response.status_code == 404
        assert response.json() == {"message": "Produk tidak ditemukan.", "code": "not_found"}

    async def test_delete_removes_cart_items_too(self, client, session_factory):
        product = await create_product(client)
        other = await create_product(client, name="Kaos Polos")
        _, headers = await register_and_login(client)
        await client.post("/cart/add", json={"productId": product["id"], "quantity": 2}, headers=headers)
        await client.post("/cart/add", json={"productId": other["id"], "quantity": 1}, headers=headers)

        response = await client.delete(f"/products/{product['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Produk berhasil dihapus."}

        cart = (await client.get("/cart", headers=headers)).json()["data"]
        assert [item["productId"] for item in cart] == [other["id"]]

        products = (await client.get("/products")).json()["data"]
        assert [p["id"] for p in products] == [other["id"]]

        async with session_factory() as session:
            remaining = await session.scalar(
                select(func.count()).select_from(CartItem).where(CartItem.product_id == product["id"])
            )
            assert remaining == 0

    async def test_non_numeric_id_is_validation_error(self, client):
        response = await client.delete("/products/abc")

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_failed_delete_rolls_back_cart_items(client, session_factory):
    product = await create_product(client)
    _, headers = await register_and_login(client)
    await client.post("/cart/add", json={"productId": product["id"], "quantity": 2}, headers=headers)

    async def failing_commit_db():
        async with session_factory() as session:
            session.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk full")))
            yield session

    app.dependency_overrides[get_db] = failing_commit_db
    response = await client.delete(f"/products/{product['id']}")

    assert response.status_code == 500
    assert response.json() == {"message": "Gagal menghapus produk.", "code": "internal_error"}

    async with session_factory() as session:
        items = await session.scalar(
            select(func.count()).select_from(CartItem).where(CartItem.product_id == product["id"])
        )
        assert items == 1
        assert await session.get(Product, product["id"]) is not None
