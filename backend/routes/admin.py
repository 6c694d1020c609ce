from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

from database import get_db
from models.seller import SellerCreate, SellerUpdate
from utils.audit import log_audit
from utils.guards import parse_object_id
from utils.security import require_admin
from utils.serializers import serialize_seller

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


# =====================================================
# SELLER ALLOW-LIST
# =====================================================

@router.get("/sellers")
async def list_sellers(
    email: Optional[str] = None,
    db=Depends(get_db),
):
    query = {"google_email": email} if email else {}
    cursor = db.sellers.find(query).sort("created_at", 1)

    sellers = [serialize_seller(s) async for s in cursor]
    return {
        "count": len(sellers),
        "sellers": sellers,
    }


@router.post("/sellers", status_code=201)
async def create_seller(
    data: SellerCreate,
    db=Depends(get_db),
):
    existing = await db.sellers.find_one({
        "google_email": data.google_email,
        "brand_code": data.brand_code,
    })
    if existing:
        raise HTTPException(status_code=409, detail="Seller brand already registered")

    now = datetime.utcnow()
    seller = {
        "google_email": data.google_email,
        "brand_code": data.brand_code,
        "brand_name": data.brand_name,
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }

    try:
        result = await db.sellers.insert_one(seller)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Seller brand already registered")

    seller["_id"] = result.inserted_id

    await log_audit(
        db,
        actor_id=None,
        actor_role="admin",
        action="SELLER_ALLOWLISTED",
        metadata={"google_email": data.google_email, "brand_code": data.brand_code},
    )

    return serialize_seller(seller)


@router.patch("/sellers/{seller_id}")
async def update_seller(
    seller_id: str,
    data: SellerUpdate,
    db=Depends(get_db),
):
    oid = parse_object_id(seller_id, "seller id")

    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="Nothing to update")

    result = await db.sellers.update_one(
        {"_id": oid},
        {"$set": {**changes, "updated_at": datetime.utcnow()}},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Seller not found")

    await log_audit(
        db,
        actor_id=None,
        actor_role="admin",
        action="SELLER_UPDATED",
        metadata={"seller_id": seller_id, **changes},
    )

    return serialize_seller(await db.sellers.find_one({"_id": oid}))
