import re
from datetime import datetime

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from config.constants import PRODUCT_SUGGEST_MIN_CHARS, PRODUCT_SUGGEST_LIMIT
from models.product import ProductCreate
from models.seller import SellerRecord
from utils.serializers import serialize_catalog_product


def _url(value):
    return str(value) if value is not None else None


async def find_brand_by_code(db, brand_code: str):
    return await db.brands.find_one({"brand_code": brand_code})


async def get_or_create_brand(db, seller: SellerRecord) -> ObjectId:
    brand = await find_brand_by_code(db, seller.brand_code)
    if brand:
        return brand["_id"]

    now = datetime.utcnow()
    try:
        result = await db.brands.insert_one({
            "name": seller.brand_name,
            "brand_code": seller.brand_code,
            "created_at": now,
            "updated_at": now,
        })
    except DuplicateKeyError:
        # created concurrently by another registration
        brand = await find_brand_by_code(db, seller.brand_code)
        return brand["_id"]

    return result.inserted_id


async def register_product(db, seller: SellerRecord, data: ProductCreate) -> dict:
    brand_id = await get_or_create_brand(db, seller)
    now = datetime.utcnow()

    product = await db.products.insert_one({
        "brand_id": brand_id,
        "name": data.product_name,
        "base_url": _url(data.base_url),
        "base_image_url": _url(data.base_image_url),
        "description": data.description,
        "created_at": now,
        "updated_at": now,
    })

    options = await db.product_options.insert_many([
        {
            "product_id": product.inserted_id,
            "color": option.color,
            "size": option.size,
            "product_url": _url(option.product_url),
            "image_url": _url(option.image_url),
            "stock_quantity": option.stock_quantity,
            "is_available": True,
            "created_at": now,
            "updated_at": now,
        }
        for option in data.options
    ])

    return {
        "brand_id": str(brand_id),
        "product_id": str(product.inserted_id),
        "option_ids": [str(i) for i in options.inserted_ids],
    }


async def suggest_product_names(db, query: str) -> list:
    query = (query or "").strip()
    if len(query) < PRODUCT_SUGGEST_MIN_CHARS:
        return []

    cursor = db.products.find(
        {"name": {"$regex": re.escape(query), "$options": "i"}},
        {"name": 1},
    ).limit(PRODUCT_SUGGEST_LIMIT)

    return [p["name"] async for p in cursor]


async def load_catalog(db) -> list:
    products = [p async for p in db.products.find({}).sort("created_at", -1)]
    if not products:
        return []

    brand_ids = list({p["brand_id"] for p in products if p.get("brand_id")})
    brands = {
        b["_id"]: b
        async for b in db.brands.find({"_id": {"$in": brand_ids}})
    }

    options_by_product = {p["_id"]: [] for p in products}
    cursor = db.product_options.find(
        {"product_id": {"$in": list(options_by_product)}}
    ).sort([("created_at", 1), ("_id", 1)])

    async for option in cursor:
        options_by_product[option["product_id"]].append(option)

    return [
        serialize_catalog_product(p, brands.get(p.get("brand_id")), options_by_product[p["_id"]])
        for p in products
    ]
