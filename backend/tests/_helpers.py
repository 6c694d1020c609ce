"""Shared test helpers - importable from test modules."""

from __future__ import annotations

import copy
import re
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any

from bson import ObjectId
from jose import jwt
from pymongo.errors import ServerSelectionTimeoutError

PROVIDER_SECRET = "test-provider-secret"
SESSION_SECRET = "test-session-secret"
ADMIN_KEY = "test-admin-key"


# ============================================================
# In-memory stand-in for the slice of the Motor API the app uses
# ============================================================

def _matches_value(actual: Any, expected: Any) -> bool:
    if isinstance(expected, dict) and any(k.startswith("$") for k in expected):
        for op, arg in expected.items():
            if op == "$in":
                if actual not in arg:
                    return False
            elif op == "$regex":
                flags = re.IGNORECASE if "i" in expected.get("$options", "") else 0
                if not isinstance(actual, str) or not re.search(arg, actual, flags):
                    return False
            elif op == "$options":
                continue
            elif op == "$gte":
                if actual is None or actual < arg:
                    return False
            elif op == "$lt":
                if actual is None or not actual < arg:
                    return False
            else:
                raise NotImplementedError(op)
        return True
    return actual == expected


def _matches(doc: dict, query: dict) -> bool:
    return all(_matches_value(doc.get(k), v) for k, v in (query or {}).items())


class FakeCursor:
    def __init__(self, docs: list[dict]):
        self._docs = docs
        self._limit = 0

    def sort(self, key, direction=None):
        keys = key if isinstance(key, list) else [(key, direction if direction is not None else 1)]
        for field, order in reversed(keys):
            self._docs.sort(
                key=lambda d: (d.get(field) is None, d.get(field)),
                reverse=order == -1,
            )
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def __aiter__(self):
        docs = self._docs[: self._limit] if self._limit else self._docs
        self._iter = iter(docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    def __init__(self, name: str, database: "FakeDatabase"):
        self.name = name
        self._db = database
        self.docs: list[dict] = []

    def _check(self):
        if self.name in self._db.failing:
            raise ServerSelectionTimeoutError(f"{self.name} unavailable")

    def seed(self, **doc) -> dict:
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return doc

    def find(self, query=None, projection=None):
        self._check()
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query)])

    async def find_one(self, query=None):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                return copy.deepcopy(d)
        return None

    async def insert_one(self, doc: dict):
        self._check()
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def insert_many(self, docs: list[dict]):
        self._check()
        ids = []
        for doc in docs:
            doc.setdefault("_id", ObjectId())
            self.docs.append(copy.deepcopy(doc))
            ids.append(doc["_id"])
        return SimpleNamespace(inserted_ids=ids)

    async def update_one(self, query: dict, update: dict, upsert: bool = False):
        self._check()
        target = next((d for d in self.docs if _matches(d, query)), None)

        if target is None:
            if not upsert:
                return SimpleNamespace(matched_count=0, modified_count=0)
            target = {k: v for k, v in query.items() if not isinstance(v, dict)}
            target["_id"] = ObjectId()
            self.docs.append(target)

        for field, value in update.get("$set", {}).items():
            target[field] = value
        for field, value in update.get("$inc", {}).items():
            target[field] = target.get(field, 0) + value

        return SimpleNamespace(matched_count=1, modified_count=1)

    async def count_documents(self, query: dict) -> int:
        self._check()
        return sum(1 for d in self.docs if _matches(d, query))


class FakeDatabase:
    def __init__(self):
        self._collections: dict[str, FakeCollection] = {}
        self.failing: set[str] = set()

    def __getattr__(self, name: str) -> FakeCollection:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self)
        return self._collections[name]

    async def command(self, name: str):
        return {"ok": 1}


# ============================================================
# Tokens
# ============================================================

def make_provider_token(
    subject: str = "user-1",
    provider: str | None = "kakao",
    email: str | None = None,
    name: str | None = None,
    secret: str = PROVIDER_SECRET,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    claims = {
        "sub": subject,
        "aud": "authenticated",
        "exp": datetime.utcnow() + expires_in,
        "app_metadata": {"provider": provider} if provider else {},
        "user_metadata": {"name": name} if name else {},
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


# ============================================================
# Seeding
# ============================================================

def seed_seller(db, email, brand_code, brand_name=None, is_active=True, created_at=None) -> dict:
    now = created_at or datetime.utcnow()
    return db.sellers.seed(
        google_email=email,
        brand_code=brand_code,
        brand_name=brand_name or brand_code.upper(),
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )


def seed_product(db, brand_code, name, options=(("black", "M"),), created_at=None) -> dict:
    """Brand (created when missing), product and options; returns ids."""
    now = created_at or datetime.utcnow()
    brand = next((b for b in db.brands.docs if b["brand_code"] == brand_code), None)
    if brand is None:
        brand = db.brands.seed(name=brand_code.upper(), brand_code=brand_code, created_at=now)

    product = db.products.seed(brand_id=brand["_id"], name=name, created_at=now)
    option_ids = [
        db.product_options.seed(
            product_id=product["_id"],
            color=color,
            size=size,
            stock_quantity=3,
            is_available=True,
            created_at=now,
        )["_id"]
        for color, size in options
    ]
    return {"brand_id": brand["_id"], "product_id": product["_id"], "option_ids": option_ids}


def seed_application(db, creator_id, option_ids, status="pending", created_at=None, name="Mina") -> dict:
    now = created_at or datetime.utcnow()
    application = db.sponsorship_applications.seed(
        creator_id=creator_id,
        creator_name=name,
        phone_number="01012345678",
        address="Seoul, Gangnam-gu",
        wconcept_id="mina_w",
        sns_links=["https://instagram.com/mina"],
        status=status,
        wconcept_styleclip_url=None,
        sns_upload_url=None,
        created_at=now,
        updated_at=now,
    )
    for option_id in option_ids:
        db.sponsorship_product_options.seed(
            sponsorship_application_id=application["_id"],
            product_option_id=option_id,
            created_at=now,
        )
    return application


def bearer(session_token: str) -> dict:
    return {"Authorization": f"Bearer {session_token}"}
