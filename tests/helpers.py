# tests/helpers.py

FAKE_IMAGE_URL = "https://ik.imagekit.io/demo/shoe.png"


async def register_and_login(client, name="Budi", email="budi@example.com", password="rahasia123"):
    """Register a user, log in, and return (user summary, auth headers)."""
    response = await client.post("/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text

    response = await client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


async def create_product(client, name="Sepatu Lari", price="250000", stock="10", category="shoes", **extra):
    data = {"name": name, "description": f"{name} description", "price": price, "stock": stock, "category": category}
    response = await client.post("/products", data=data, **extra)
    assert response.status_code == 201, response.text
    return response.json()
