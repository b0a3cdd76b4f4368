def test_cart_add_overwrite_and_list(client):
    first = client.post("/cart", json={"userEmail": "a@x.com", "productID": "p1", "quantity": 1, "name": "Mug", "price": 10})
    assert first.status_code == 200
    assert first.json() == {"message": "Item added to cart"}
    client.post("/cart", json={"userEmail": "a@x.com", "productID": "p1", "quantity": 3, "name": "Mug", "price": 10})

    items = client.get("/cart/a@x.com").json()
    assert len(items) == 1
    assert items[0]["quantity"] == 3


def test_cart_requires_key_fields(client, supabase):
    res = client.post("/cart", json={"productID": "p1", "quantity": 1})
    assert res.status_code == 400
    res = client.post("/cart", json={"userEmail": "a@x.com", "quantity": 1})
    assert res.status_code == 400
    assert supabase.calls == []


def test_cart_delete_item(client):
    client.post("/cart", json={"userEmail": "a@x.com", "productID": "p1", "quantity": 1})
    res = client.delete("/cart/a@x.com/p1")
    assert res.status_code == 200
    assert res.json() == {"message": "Item removed from cart"}
    assert client.get("/cart/a@x.com").json() == []


def test_sales_record_list_and_delete(client):
    sale = {
        "salesId": "s1",
        "userEmail": "a@x.com",
        "totalAmount": 25.0,
        "currency": "usd",
        "paymentStatus": "paid",
        "shippingAddress": {"line1": "1 Main St"},
        "products": [{"productName": "Mug", "quantity": 2, "price": 20.0}],
    }
    res = client.post("/sales", json=sale)
    assert res.status_code == 200
    assert res.json() == {"message": "Sale recorded", "saleId": "s1"}

    listed = client.get("/sales").json()
    assert len(listed) == 1
    assert listed[0]["saleId"] == "s1"
    assert listed[0]["timestamp"]

    assert [s["saleId"] for s in client.get("/sales/user/a@x.com").json()] == ["s1"]
    assert client.get("/sales/user/b@x.com").json() == []

    res = client.delete("/sales/s1")
    assert res.json() == {"message": "Sale deleted"}
    assert client.get("/sales").json() == []


def test_sales_generates_id(client):
    res = client.post("/sales", json={"userEmail": "a@x.com", "totalAmount": 5})
    assert res.status_code == 200
    assert res.json()["saleId"]


def test_sales_invalid_payload(client):
    res = client.post("/sales", json={"userEmail": "not-an-email", "totalAmount": 5})
    assert res.status_code == 400


def test_mixed_case_email_is_kept_as_sent(client, supabase):
    email = "Jane@Shop.COM"
    client.post("/cart", json={"userEmail": email, "productID": "p1", "quantity": 2})
    assert supabase.tables["carts"][0]["userEmail"] == email

    items = client.get(f"/cart/{email}").json()
    assert [i["productID"] for i in items] == ["p1"]

    client.delete(f"/cart/{email}/p1")
    assert supabase.tables["carts"] == []

    client.post("/sales", json={"salesId": "s7", "userEmail": email, "totalAmount": 9})
    assert [s["saleId"] for s in client.get(f"/sales/user/{email}").json()] == ["s7"]
