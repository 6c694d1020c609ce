import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.errors import PyMongoError

from database import get_db
from config.constants import STATUS_FILTER_ALL
from models.application import ApplicationStatusUpdate
from models.auth import Role
from models.product import ProductCreate
from utils.applications import (
    application_ids_for_brand,
    application_list_response,
    load_applications,
    set_application_status,
    validate_status_filter,
)
from utils.audit import log_audit
from utils.guards import parse_object_id, require_selected_brand
from utils.products import find_brand_by_code, register_product, suggest_product_names
from utils.security import require_role
from utils.serializers import serialize_seller

router = APIRouter(
    prefix="/seller",
    tags=["Seller"]
)
logger = logging.getLogger(__name__)


# ======================================================
# PRODUCT REGISTRATION
# ======================================================

@router.post("/products", status_code=201)
async def create_product(
    data: ProductCreate,
    gate=Depends(require_role(Role.SELLER)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    brand = require_selected_brand(gate.session)

    try:
        created = await register_product(db, brand, data)
    except PyMongoError:
        logger.exception("PRODUCT_REGISTER_ERROR brand=%s", brand.brand_code)
        raise HTTPException(
            status_code=500,
            detail="Product registration failed. Please try again.",
        )

    await log_audit(
        db,
        actor_id=gate.session.identity.subject,
        actor_role="seller",
        action="PRODUCT_REGISTERED",
        metadata={"brand_code": brand.brand_code, "product_id": created["product_id"]},
    )

    return {
        "message": "Product registered",
        "brand": serialize_seller(brand),
        **created,
    }


@router.get("/products/suggest")
async def suggest_products(
    q: str = Query("", description="Partial product name"),
    gate=Depends(require_role(Role.SELLER)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    return {"suggestions": await suggest_product_names(db, q)}


# ======================================================
# APPLICATIONS FOR THE SELECTED BRAND
# ======================================================

@router.get("/applications")
async def brand_applications(
    status: str = Query(STATUS_FILTER_ALL),
    gate=Depends(require_role(Role.SELLER)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    status_filter = validate_status_filter(status)
    seller = require_selected_brand(gate.session)

    applications = []
    brand = await find_brand_by_code(db, seller.brand_code)

    # a brand document only exists once a product has been registered
    if brand:
        ids = await application_ids_for_brand(db, brand["_id"])
        if ids:
            applications = await load_applications(db, {"_id": {"$in": ids}}, brand_id=brand["_id"])

    return {
        "brand": serialize_seller(seller),
        **application_list_response(applications, status_filter),
    }


@router.patch("/applications/{application_id}/status")
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    gate=Depends(require_role(Role.SELLER)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    oid = parse_object_id(application_id, "application id")
    seller = require_selected_brand(gate.session)

    brand = await find_brand_by_code(db, seller.brand_code)
    if not brand:
        raise HTTPException(status_code=404, detail="Application not found")

    await set_application_status(db, oid, brand["_id"], data.status)

    await log_audit(
        db,
        actor_id=gate.session.identity.subject,
        actor_role="seller",
        action=f"APPLICATION_{data.status.upper()}",
        metadata={"application_id": application_id, "brand_code": seller.brand_code},
    )

    return {
        "message": f"Application {data.status}",
        "id": application_id,
        "status": data.status,
    }
