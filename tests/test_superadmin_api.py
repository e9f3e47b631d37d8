from app.version import API_PREFIX
from models import db, Discount

ADMIN = f"{API_PREFIX}/superadmin"


def _discount_body(**kw):
    body = {
        "brand_id": "brand-1",
        "discount_name": "Lunch deal",
        "discount_type": "cart",
        "discount_method": "percentage",
        "discount_value": 10,
        "min_order_value": 150,
        "order_types": ["pickup"],
        "location_ids": ["loc-1"],
        "active_days": ["Monday", "friday"],
        "active_time_slots": [{"start": "11:00", "end": "14:00"}],
    }
    body.update(kw)
    return body


def test_superadmin_routes_need_a_token(client):
    r = client.get(f"{ADMIN}/standard-discounts")
    assert r.status_code == 401
    r = client.get(f"{ADMIN}/standard-discounts", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_qa_role_cannot_author_discounts(client, qa_headers):
    r = client.get(f"{ADMIN}/standard-discounts", headers=qa_headers)
    assert r.status_code == 403


def test_standard_discount_crud(client, storefront, admin_headers):
    r = client.post(f"{ADMIN}/standard-discounts", json=_discount_body(), headers=admin_headers)
    assert r.status_code == 201
    created = r.get_json()["data"]
    assert created["active_days"] == ["monday", "friday"]
    assert created["discount_value"] == 10.0
    discount_id = created["id"]

    r = client.get(f"{ADMIN}/standard-discounts?brand_id=brand-1", headers=admin_headers)
    assert [d["id"] for d in r.get_json()["data"]] == [discount_id]

    r = client.put(f"{ADMIN}/standard-discounts/{discount_id}",
                   json=_discount_body(discount_value=15), headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["discount_value"] == 15.0

    r = client.post(f"{ADMIN}/standard-discounts/{discount_id}/status", json={"is_active": False},
                    headers=admin_headers)
    assert r.get_json()["data"]["is_active"] is False

    r = client.delete(f"{ADMIN}/standard-discounts/{discount_id}", headers=admin_headers)
    assert r.status_code == 200
    assert client.get(f"{ADMIN}/standard-discounts/{discount_id}", headers=admin_headers).status_code == 404


def test_standard_discount_brand_cannot_change(client, storefront, admin_headers):
    discount_id = client.post(f"{ADMIN}/standard-discounts", json=_discount_body(),
                              headers=admin_headers).get_json()["data"]["id"]
    r = client.put(f"{ADMIN}/standard-discounts/{discount_id}", json=_discount_body(brand_id="brand-2"),
                   headers=admin_headers)
    assert r.status_code == 400


def test_standard_discount_validation(client, storefront, admin_headers):
    r = client.post(f"{ADMIN}/standard-discounts", json=_discount_body(discount_type="product"),
                    headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()["message"] == "Validation failed"


def test_authored_discount_reaches_the_quote(client, storefront, admin_headers):
    body = _discount_body(discount_type="product", reference_ids=["pizza-1"], discount_method="fixed_amount",
                          discount_value=30, min_order_value=0, active_days=[], active_time_slots=[])
    assert client.post(f"{ADMIN}/standard-discounts", json=body, headers=admin_headers).status_code == 201
    quote = client.post(f"{API_PREFIX}/storefront/pricing/quote", json={
        "brand_id": "brand-1", "location_id": "loc-1", "delivery_type": "pickup",
        "lines": [{"line_id": "l1", "product_id": "pizza-1"}],
    }).get_json()["data"]
    assert quote["item_discounts"] == {"l1": 30.0}


def test_voucher_create_and_duplicate(client, storefront, admin_headers):
    body = {"brand_id": "brand-1", "code": "summer", "discount_method": "fixed_amount",
            "discount_value": 25, "order_types": ["pickup", "delivery"], "usage_limit": 100}
    r = client.post(f"{ADMIN}/vouchers", json=body, headers=admin_headers)
    assert r.status_code == 201
    assert r.get_json()["data"]["code"] == "SUMMER"
    assert r.get_json()["data"]["used_count"] == 0
    assert client.post(f"{ADMIN}/vouchers", json=body, headers=admin_headers).status_code == 409
    assert len(client.get(f"{ADMIN}/vouchers", headers=admin_headers).get_json()["data"]) == 1


def test_used_voucher_is_deactivated_instead_of_deleted(client, storefront, admin_headers):
    body = {"brand_id": "brand-1", "code": "USED", "discount_method": "percentage",
            "discount_value": 10, "order_types": ["pickup"]}
    voucher_id = client.post(f"{ADMIN}/vouchers", json=body, headers=admin_headers).get_json()["data"]["id"]
    row = db.session.get(Discount, voucher_id)
    row.used_count = 3
    db.session.commit()

    r = client.delete(f"{ADMIN}/vouchers/{voucher_id}", headers=admin_headers)
    assert r.get_json()["message"] == "Voucher deactivated"
    assert r.get_json()["data"]["is_active"] is False


def test_unused_voucher_is_deleted(client, storefront, admin_headers):
    body = {"brand_id": "brand-1", "code": "FRESH", "discount_method": "percentage",
            "discount_value": 10, "order_types": ["pickup"]}
    voucher_id = client.post(f"{ADMIN}/vouchers", json=body, headers=admin_headers).get_json()["data"]["id"]
    r = client.delete(f"{ADMIN}/vouchers/{voucher_id}", headers=admin_headers)
    assert r.get_json()["message"] == "Voucher deleted"
    assert db.session.get(Discount, voucher_id) is None


def test_upsell_crud(client, storefront, admin_headers):
    body = {
        "brand_id": "brand-1", "upsell_name": "Drinks", "offer_type": "category",
        "trigger_conditions": [{"type": "cart_value_over", "reference_id": "150"}],
        "offer_category_ids": ["cat-drinks"], "discount_type": "percentage", "discount_value": 20,
        "order_types": ["pickup", "delivery"],
    }
    r = client.post(f"{ADMIN}/upsells", json=body, headers=admin_headers)
    assert r.status_code == 201
    upsell = r.get_json()["data"]
    assert upsell["views"] == 0
    assert client.get(f"{ADMIN}/upsells/{upsell['id']}", headers=admin_headers).status_code == 200
    assert len(client.get(f"{ADMIN}/upsells?brand_id=brand-1", headers=admin_headers).get_json()["data"]) == 1
    assert client.delete(f"{ADMIN}/upsells/{upsell['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"{ADMIN}/upsells/{upsell['id']}", headers=admin_headers).status_code == 404


def test_qa_codes_are_sequential(client, qa_headers):
    body = {"title": "Voucher at checkout", "acceptance_criteria": "Discount shows on the receipt"}
    first = client.post(f"{ADMIN}/qa", json=body, headers=qa_headers)
    second = client.post(f"{ADMIN}/qa", json=body, headers=qa_headers)
    assert first.status_code == 201
    assert first.get_json()["data"]["code"] == "OFQ-001"
    assert second.get_json()["data"]["code"] == "OFQ-002"


def test_qa_update_and_delete(client, admin_headers):
    client.post(f"{ADMIN}/qa", json={"title": "T", "acceptance_criteria": "A"}, headers=admin_headers)
    r = client.put(f"{ADMIN}/qa/ofq-001", json={"status": "Ready"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["status"] == "Ready"
    assert r.get_json()["data"]["title"] == "T"
    assert len(client.get(f"{ADMIN}/qa?status=Ready", headers=admin_headers).get_json()["data"]) == 1
    assert client.delete(f"{ADMIN}/qa/OFQ-001", headers=admin_headers).status_code == 200
    assert client.get(f"{ADMIN}/qa/OFQ-001", headers=admin_headers).status_code == 404


def test_qa_rejects_unknown_status(client, admin_headers):
    r = client.post(f"{ADMIN}/qa", json={"title": "T", "acceptance_criteria": "A", "status": "Done"},
                    headers=admin_headers)
    assert r.status_code == 400


def test_discount_validation_endpoint(client, qa_headers):
    r = client.get(f"{ADMIN}/discount-validation", headers=qa_headers)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["failed"] == 0
    assert data["passed"] == len(data["results"])
