def test_parse_preview(client):
    r = client.post("/api/quick-input/parse", json={"raw": "10/05 점심 9,000원 #변동 #식비 카드", "locale": "ko"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["amount"] == 9000
    assert body["amount_display"] == "₩9,000"
    assert body["can_submit"] is True
    assert body["type"] == "expense"
    assert body["fixed"] is False
    assert body["category"] == "식비"
    assert body["description"] == "점심"
    assert body["tags"] == ["변동", "식비"]
    assert body["payment_method"] == "card"
    assert body["date"].endswith("-10-05T00:00:00.000+09:00")


def test_parse_preview_without_amount(client):
    r = client.post("/api/quick-input/parse", json={"raw": "환불 -10000원"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["amount"] is None
    assert body["amount_display"] is None
    assert body["can_submit"] is False
    assert "환불" in body["description"]


def test_parse_preview_uses_user_currency(client):
    client.patch("/api/user/settings", json={"currency": "USD", "locale": "en-US"})
    r = client.post("/api/quick-input/parse", json={"raw": "Lunch $12.50 #food", "locale": "en"})
    assert r.status_code == 200, r.text
    assert r.json()["amount_display"] == "$12.50"


def test_parse_preview_fallbacks(client):
    r = client.post(
        "/api/quick-input/parse",
        json={"raw": "용돈 50000원", "fallback_type": "income", "fallback_fixed": True},
    )
    body = r.json()
    assert body["type"] == "income"
    assert body["fixed"] is True


def test_parse_preview_validation(client):
    assert client.post("/api/quick-input/parse", json={"raw": ""}).status_code == 422
    assert client.post("/api/quick-input/parse", json={"raw": "x" * 501}).status_code == 422
    assert client.post("/api/quick-input/parse", json={"raw": "a", "locale": "fr"}).status_code == 422


def test_create_from_quick_input(client):
    r = client.post("/api/quick-input/transactions", json={"raw": "2025-10-27 점심 12,000원 #식비 현금"})
    assert r.status_code == 201, r.text
    txn = r.json()
    assert txn["occurred_at"] == "2025-10-27T00:00:00.000+09:00"
    assert txn["amount"] == 12000
    assert txn["type"] == "expense"
    assert txn["fixed"] is False
    assert txn["category"] == "식비"
    assert txn["description"] == "점심"
    assert txn["payment_method"] == "cash"

    r = client.get("/api/transactions")
    assert r.json()["meta"]["total_count"] == 1


def test_create_from_quick_input_defaults(client):
    r = client.post("/api/quick-input/transactions", json={"raw": "5000원"})
    assert r.status_code == 201, r.text
    txn = r.json()
    assert txn["category"] == "미분류"
    assert txn["description"] == "미분류"
    assert txn["occurred_at"].endswith("T00:00:00.000+09:00")


def test_create_from_quick_input_requires_amount(client):
    r = client.post("/api/quick-input/transactions", json={"raw": "점심 #식비"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Amount is required"
