"""Tests for the creator views: catalog, applications and content URLs."""

from datetime import datetime, timedelta

import pytest

from _helpers import seed_application, seed_product

T1 = datetime(2024, 5, 1)


@pytest.fixture
def creator_headers(sign_in):
    return sign_in(subject="k-1", provider="kakao", name="Mina")


def application_payload(option_ids, **overrides):
    payload = {
        "creator_name": "Mina",
        "phone_number": "010-1234-5678",
        "address": "Seoul, Gangnam-gu",
        "wconcept_id": "mina_w",
        "sns_links": ["https://instagram.com/mina", ""],
        "selected_options": [str(i) for i in option_ids],
    }
    payload.update(overrides)
    return payload


# =========================
# Gate
# =========================

def test_seller_is_sent_to_landing(client, db, sign_in):
    db.sellers.seed(google_email="a@x.com", brand_code="x", brand_name="X", is_active=True, created_at=T1)
    headers = sign_in(subject="g-1", provider="google", email="a@x.com")

    resp = client.get("/api/creator/catalog", headers=headers, follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/api/home"
    assert resp.headers["x-redirect-reason"] == "wrong_role"


def test_anonymous_is_sent_to_login(client):
    resp = client.get("/api/creator/applications", follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/api/auth/login"


# =========================
# Catalog
# =========================

def test_catalog_lists_products_newest_first_with_brand_and_options(client, db, creator_headers):
    seed_product(db, "x", "Old Shirt", created_at=T1)
    seed_product(db, "y", "New Coat", options=[("camel", "S"), ("camel", "M")], created_at=T1 + timedelta(days=1))

    body = client.get("/api/creator/catalog", headers=creator_headers).json()

    assert [p["name"] for p in body["products"]] == ["New Coat", "Old Shirt"]
    coat = body["products"][0]
    assert coat["brand"]["brand_code"] == "y"
    assert [(o["color"], o["size"]) for o in coat["options"]] == [("camel", "S"), ("camel", "M")]


def test_empty_catalog(client, creator_headers):
    assert client.get("/api/creator/catalog", headers=creator_headers).json() == {"products": []}


# =========================
# Submit
# =========================

def test_submit_application(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt", options=[("white", "M"), ("navy", "L")])
    option_ids = product["option_ids"]

    resp = client.post(
        "/api/creator/applications",
        json=application_payload(option_ids + option_ids[:1]),
        headers=creator_headers,
    )

    assert resp.status_code == 201, resp.text
    assert resp.json()["status"] == "pending"

    [application] = db.sponsorship_applications.docs
    assert application["creator_id"] == "k-1"
    assert application["status"] == "pending"
    assert application["sns_links"] == ["https://instagram.com/mina"]

    links = db.sponsorship_product_options.docs
    assert [link["product_option_id"] for link in links] == option_ids
    assert all(link["sponsorship_application_id"] == application["_id"] for link in links)


def test_submit_with_unknown_option_is_400(client, db, creator_headers):
    resp = client.post(
        "/api/creator/applications",
        json=application_payload(["65f000000000000000000000"]),
        headers=creator_headers,
    )

    assert resp.status_code == 400
    assert db.sponsorship_applications.docs == []


@pytest.mark.parametrize("overrides", [
    {"creator_name": ""},
    {"phone_number": "0101234"},
    {"address": "Sel"},
    {"wconcept_id": ""},
    {"sns_links": [""]},
    {"sns_links": ["instagram"]},
    {"selected_options": []},
])
def test_submit_validation(client, db, creator_headers, overrides):
    product = seed_product(db, "x", "Linen Shirt")

    resp = client.post(
        "/api/creator/applications",
        json=application_payload(product["option_ids"], **overrides),
        headers=creator_headers,
    )

    assert resp.status_code == 422


def test_submit_is_rate_limited(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt")
    payload = application_payload(product["option_ids"])

    codes = [
        client.post("/api/creator/applications", json=payload, headers=creator_headers).status_code
        for _ in range(6)
    ]

    assert codes == [201] * 5 + [429]


# =========================
# My applications
# =========================

def test_my_applications_only_shows_own(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt")
    seed_application(db, "k-1", product["option_ids"], created_at=T1)
    seed_application(db, "k-1", product["option_ids"], status="approved", created_at=T1 + timedelta(hours=1))
    seed_application(db, "k-2", product["option_ids"], created_at=T1 + timedelta(hours=2), name="Someone")

    body = client.get("/api/creator/applications", headers=creator_headers).json()

    assert [a["status"] for a in body["applications"]] == ["approved", "pending"]
    assert body["counts"] == {"pending": 1, "approved": 1, "rejected": 0, "total": 2}
    assert body["applications"][0]["brand_name"] == "X"

    approved = client.get("/api/creator/applications", params={"status": "approved"}, headers=creator_headers).json()
    assert len(approved["applications"]) == 1


# =========================
# Content URLs
# =========================

def test_update_urls_on_approved_application(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt")
    application = seed_application(db, "k-1", product["option_ids"], status="approved")

    resp = client.patch(
        f"/api/creator/applications/{application['_id']}/urls",
        json={"wconcept_styleclip_url": "https://wconcept.example.com/clip/1", "sns_upload_url": ""},
        headers=creator_headers,
    )

    assert resp.status_code == 200
    stored = db.sponsorship_applications.docs[0]
    assert stored["wconcept_styleclip_url"] == "https://wconcept.example.com/clip/1"
    assert stored["sns_upload_url"] is None


def test_update_urls_requires_approval(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt")
    application = seed_application(db, "k-1", product["option_ids"], status="pending")

    resp = client.patch(
        f"/api/creator/applications/{application['_id']}/urls",
        json={"sns_upload_url": "https://instagram.com/p/1"},
        headers=creator_headers,
    )

    assert resp.status_code == 409


def test_cannot_update_someone_elses_application(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt")
    application = seed_application(db, "k-2", product["option_ids"], status="approved")

    resp = client.patch(
        f"/api/creator/applications/{application['_id']}/urls",
        json={"sns_upload_url": "https://instagram.com/p/1"},
        headers=creator_headers,
    )

    assert resp.status_code == 404


def test_update_urls_validates_urls(client, db, creator_headers):
    product = seed_product(db, "x", "Linen Shirt")
    application = seed_application(db, "k-1", product["option_ids"], status="approved")

    resp = client.patch(
        f"/api/creator/applications/{application['_id']}/urls",
        json={"sns_upload_url": "nope"},
        headers=creator_headers,
    )

    assert resp.status_code == 422
