from bson import ObjectId
from datetime import datetime


def serialize_object_id(value):
    return str(value) if isinstance(value, ObjectId) else value


def _iso(value):
    return value.isoformat() if isinstance(value, datetime) else None


def serialize_seller(seller) -> dict:
    # accepts raw sellers documents and SellerRecord models alike
    if not isinstance(seller, dict):
        seller = seller.model_dump()
        seller["_id"] = seller.pop("id")

    return {
        "id": serialize_object_id(seller["_id"]),
        "google_email": seller.get("google_email"),
        "brand_code": seller.get("brand_code"),
        "brand_name": seller.get("brand_name"),
        "is_active": seller.get("is_active", False),
        "created_at": _iso(seller.get("created_at")),
        "updated_at": _iso(seller.get("updated_at")),
    }


def serialize_brand(brand: dict | None) -> dict | None:
    if not brand:
        return None

    return {
        "id": str(brand["_id"]),
        "name": brand.get("name"),
        "brand_code": brand.get("brand_code"),
    }


def serialize_option(option: dict) -> dict:
    return {
        "id": str(option["_id"]),
        "product_id": serialize_object_id(option.get("product_id")),
        "color": option.get("color"),
        "size": option.get("size"),
        "product_url": option.get("product_url"),
        "image_url": option.get("image_url"),
        "stock_quantity": option.get("stock_quantity", 0),
        "is_available": option.get("is_available", True),
    }


def serialize_catalog_product(product: dict, brand: dict | None, options: list) -> dict:
    return {
        "id": str(product["_id"]),
        "name": product.get("name"),
        "base_url": product.get("base_url"),
        "base_image_url": product.get("base_image_url"),
        "description": product.get("description"),
        "created_at": _iso(product.get("created_at")),
        "brand": serialize_brand(brand),
        "options": [serialize_option(o) for o in options],
    }


def serialize_application(application: dict, items: list) -> dict:
    """
    ``items`` are (option, product, brand) triples in request order; the
    headline brand/product is taken from the first one.
    """
    _, first_product, first_brand = items[0]

    return {
        "id": str(application["_id"]),
        "creator_name": application.get("creator_name"),
        "phone_number": application.get("phone_number"),
        "address": application.get("address"),
        "wconcept_id": application.get("wconcept_id"),
        "sns_links": application.get("sns_links", []),
        "status": application.get("status"),
        "wconcept_styleclip_url": application.get("wconcept_styleclip_url"),
        "sns_upload_url": application.get("sns_upload_url"),
        "created_at": _iso(application.get("created_at")),
        "brand_name": first_brand.get("name"),
        "product_name": first_product.get("name"),
        "requested_items": [
            {
                "option_id": str(option["_id"]),
                "product_name": product.get("name"),
                "color": option.get("color"),
                "size": option.get("size"),
                "product_url": option.get("product_url"),
                "image_url": option.get("image_url"),
            }
            for option, product, _ in items
        ],
    }
