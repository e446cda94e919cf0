import pytest

from pinvent.services.image_host import file_size_formatter

PRODUCT = {
    "name": "Desk lamp",
    "sku": "LAMP-1",
    "category": "Lighting",
    "quantity": "12",
    "price": "19.99",
    "description": "Adjustable arm",
}
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 2040


@pytest.fixture()
def owner(register):
    assert register().status_code == 201


def create(client, files=None, **overrides):
    return client.post("/api/products", data={**PRODUCT, **overrides}, files=files)


def test_products_need_login(client):
    assert client.get("/api/products").status_code == 401
    assert create(client).status_code == 401


def test_create_product_without_image(client, owner):
    r = create(client)
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Desk lamp"
    assert body["sku"] == "LAMP-1"
    assert body["image"] == {}


def test_create_product_requires_fields(client, owner):
    r = create(client, description="")
    assert r.status_code == 400
    assert r.json()["detail"] == "Please fill in all fields"


def test_create_product_default_sku(client, owner):
    data = {k: v for k, v in PRODUCT.items() if k != "sku"}
    r = client.post("/api/products", data=data)
    assert r.status_code == 201
    assert r.json()["sku"] == "SKU"


def test_create_product_with_image(client, owner, upload_dir):
    r = create(client, files={"image": ("lamp.png", PNG, "image/png")})
    assert r.status_code == 201
    image = r.json()["image"]
    assert image["file_name"] == "lamp.png"
    assert image["file_type"] == "image/png"
    assert image["file_size"] == "2.05 KB"
    assert image["file_path"].startswith("/uploads/products/")

    stored = upload_dir / "products" / image["file_path"].rsplit("/", 1)[1]
    assert stored.read_bytes() == PNG


def test_create_product_rejects_non_images(client, owner):
    r = create(client, files={"image": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 400


def test_list_only_own_products_newest_first(client, owner, register):
    create(client, name="First")
    create(client, name="Second")

    client.cookies.clear()
    register(email="bob@example.com", name="Bob")
    create(client, name="Bob's")
    assert [p["name"] for p in client.get("/api/products").json()] == ["Bob's"]

    client.cookies.clear()
    client.post("/api/users/login", json={"email": "ada@example.com", "password": "secret"})
    assert [p["name"] for p in client.get("/api/products").json()] == ["Second", "First"]


def test_other_users_product_is_unauthorized(client, owner, register):
    product_id = create(client).json()["id"]

    client.cookies.clear()
    register(email="bob@example.com", name="Bob")
    assert client.get(f"/api/products/{product_id}").status_code == 401
    assert client.delete(f"/api/products/{product_id}").status_code == 401
    assert client.patch(f"/api/products/{product_id}", data={"name": "Mine"}).status_code == 401


def test_missing_product(client, owner):
    r = client.get("/api/products/999")
    assert r.status_code == 404
    assert r.json()["detail"] == "Product not found"


def test_update_product_keeps_image_without_upload(client, owner):
    created = create(client, files={"image": ("lamp.png", PNG, "image/png")}).json()

    r = client.patch(f"/api/products/{created['id']}", data={"price": "24.50"})
    assert r.status_code == 200
    body = r.json()
    assert body["price"] == "24.50"
    assert body["name"] == "Desk lamp"
    assert body["image"] == created["image"]


def test_update_product_keeps_sku(client, owner):
    created = create(client).json()
    r = client.patch(f"/api/products/{created['id']}", data={"sku": "LAMP-2", "quantity": "3"})
    assert r.status_code == 200
    assert r.json()["sku"] == "LAMP-1"
    assert r.json()["quantity"] == "3"


def test_update_product_replaces_image(client, owner):
    created = create(client, files={"image": ("lamp.png", PNG, "image/png")}).json()
    r = client.patch(
        f"/api/products/{created['id']}",
        data={"name": "Floor lamp"},
        files={"image": ("floor.jpg", b"\xff\xd8\xff" + b"\x00" * 10, "image/jpeg")},
    )
    assert r.status_code == 200
    assert r.json()["image"]["file_name"] == "floor.jpg"
    assert r.json()["image"]["file_size"] == "13 Bytes"


def test_delete_product(client, owner):
    product_id = create(client).json()["id"]
    r = client.delete(f"/api/products/{product_id}")
    assert r.status_code == 200
    assert r.json() == {"message": "Product deleted"}
    assert client.get(f"/api/products/{product_id}").status_code == 404


@pytest.mark.parametrize("size, expected", [
    (0, "0 Bytes"),
    (999, "999 Bytes"),
    (1000, "1 KB"),
    (1500, "1.5 KB"),
    (2048, "2.05 KB"),
    (1_000_000, "1 MB"),
    (3_250_000_000, "3.25 GB"),
])
def test_file_size_formatter(size, expected):
    assert file_size_formatter(size) == expected
