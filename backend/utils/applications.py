from collections import defaultdict
from datetime import datetime

from bson import ObjectId
from fastapi import HTTPException, status

from config.constants import APPLICATION_STATUSES, STATUS_FILTER_ALL
from models.application import ApplicationCreate, ApplicationStatus, ApplicationUrlsUpdate
from models.auth import Identity
from utils.guards import parse_object_ids
from utils.serializers import serialize_application


def _url(value):
    return str(value) if value is not None else None


async def _by_id(collection, ids) -> dict:
    if not ids:
        return {}
    return {doc["_id"]: doc async for doc in collection.find({"_id": {"$in": list(ids)}})}


# ============================================================
# SUBMIT (CREATOR)
# ============================================================

async def submit_application(db, identity: Identity, data: ApplicationCreate) -> ObjectId:
    option_ids = parse_object_ids(data.selected_options, "product option id")

    found = await _by_id(db.product_options, option_ids)
    if len(found) != len(option_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unknown product option selected",
        )

    now = datetime.utcnow()
    application = await db.sponsorship_applications.insert_one({
        "creator_id": identity.subject,
        "creator_email": identity.email,
        "creator_name": data.creator_name,
        "phone_number": data.phone_number,
        "address": data.address,
        "wconcept_id": data.wconcept_id,
        "sns_links": [str(link) for link in data.sns_links],
        "status": ApplicationStatus.PENDING.value,
        "wconcept_styleclip_url": None,
        "sns_upload_url": None,
        "created_at": now,
        "updated_at": now,
    })

    await db.sponsorship_product_options.insert_many([
        {
            "sponsorship_application_id": application.inserted_id,
            "product_option_id": option_id,
            "created_at": now,
        }
        for option_id in option_ids
    ])

    return application.inserted_id


# ============================================================
# LOAD WITH DETAILS
# ============================================================

async def application_ids_for_brand(db, brand_id: ObjectId) -> list:
    product_ids = [p["_id"] async for p in db.products.find({"brand_id": brand_id}, {"_id": 1})]
    if not product_ids:
        return []

    option_ids = [
        o["_id"] async for o in db.product_options.find({"product_id": {"$in": product_ids}}, {"_id": 1})
    ]
    if not option_ids:
        return []

    cursor = db.sponsorship_product_options.find({"product_option_id": {"$in": option_ids}})
    return list(dict.fromkeys([link["sponsorship_application_id"] async for link in cursor]))


async def load_applications(db, query: dict, brand_id: ObjectId | None = None) -> list:
    """
    Applications matching ``query`` joined with their requested options,
    newest first. Links whose option/product/brand no longer exist are dropped,
    as are applications left without any item. With ``brand_id`` only that
    brand's items are kept.
    """
    applications = [
        a async for a in db.sponsorship_applications.find(query).sort("created_at", -1)
    ]
    if not applications:
        return []

    cursor = db.sponsorship_product_options.find(
        {"sponsorship_application_id": {"$in": [a["_id"] for a in applications]}}
    ).sort([("created_at", 1), ("_id", 1)])
    links = [link async for link in cursor]

    options = await _by_id(db.product_options, {link["product_option_id"] for link in links})
    products = await _by_id(db.products, {o["product_id"] for o in options.values()})
    brands = await _by_id(db.brands, {p["brand_id"] for p in products.values() if p.get("brand_id")})

    items = defaultdict(list)
    for link in links:
        option = options.get(link["product_option_id"])
        product = products.get(option["product_id"]) if option else None
        brand = brands.get(product.get("brand_id")) if product else None
        if not brand:
            continue
        if brand_id is not None and brand["_id"] != brand_id:
            continue
        items[link["sponsorship_application_id"]].append((option, product, brand))

    return [
        serialize_application(a, items[a["_id"]])
        for a in applications
        if items.get(a["_id"])
    ]


# ============================================================
# FILTERS
# ============================================================

def validate_status_filter(value: str) -> str:
    if value != STATUS_FILTER_ALL and value not in APPLICATION_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status filter: {value}",
        )
    return value


def filter_by_status(applications: list, status_filter: str) -> list:
    if status_filter == STATUS_FILTER_ALL:
        return applications
    return [a for a in applications if a["status"] == status_filter]


def count_by_status(applications: list) -> dict:
    counts = {s: 0 for s in APPLICATION_STATUSES}
    for a in applications:
        if a["status"] in counts:
            counts[a["status"]] += 1
    counts["total"] = len(applications)
    return counts


def application_list_response(applications: list, status_filter: str) -> dict:
    return {
        "status_filter": status_filter,
        "counts": count_by_status(applications),
        "applications": filter_by_status(applications, status_filter),
    }


# ============================================================
# STATE CHANGES
# ============================================================

def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")


async def set_application_status(db, application_id: ObjectId, brand_id: ObjectId, new_status: str) -> dict:
    if application_id not in await application_ids_for_brand(db, brand_id):
        raise _not_found()

    application = await db.sponsorship_applications.find_one({"_id": application_id})
    if not application:
        raise _not_found()

    if application["status"] != ApplicationStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Application is already {application['status']}",
        )

    result = await db.sponsorship_applications.update_one(
        {"_id": application_id, "status": ApplicationStatus.PENDING.value},
        {"$set": {"status": new_status, "updated_at": datetime.utcnow()}},
    )
    if result.modified_count != 1:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Application was updated concurrently",
        )

    return application


async def set_application_urls(db, application_id: ObjectId, identity: Identity, data: ApplicationUrlsUpdate) -> dict:
    application = await db.sponsorship_applications.find_one({
        "_id": application_id,
        "creator_id": identity.subject,
    })
    if not application:
        raise _not_found()

    if application["status"] != ApplicationStatus.APPROVED.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Content URLs can only be added to approved applications",
        )

    update = {
        "wconcept_styleclip_url": _url(data.wconcept_styleclip_url),
        "sns_upload_url": _url(data.sns_upload_url),
    }

    await db.sponsorship_applications.update_one(
        {"_id": application_id},
        {"$set": {**update, "updated_at": datetime.utcnow()}},
    )

    return update
