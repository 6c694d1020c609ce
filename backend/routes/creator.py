import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.errors import PyMongoError

from database import get_db
from config.constants import (
    APPLICATION_RATE_LIMIT,
    APPLICATION_RATE_WINDOW_SECONDS,
    STATUS_FILTER_ALL,
)
from models.application import ApplicationCreate, ApplicationUrlsUpdate
from models.auth import Role
from utils.applications import (
    application_list_response,
    load_applications,
    set_application_urls,
    submit_application,
    validate_status_filter,
)
from utils.audit import log_audit
from utils.guards import parse_object_id
from utils.products import load_catalog
from utils.rate_limit import rate_limit
from utils.security import require_role

router = APIRouter(prefix="/creator", tags=["Creator"])
logger = logging.getLogger(__name__)


# =========================
# CATALOG
# =========================

@router.get("/catalog")
async def catalog(
    gate=Depends(require_role(Role.CREATOR)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    return {"products": await load_catalog(db)}


# =========================
# SPONSORSHIP APPLICATIONS
# =========================

@router.post("/applications", status_code=201)
async def apply(
    data: ApplicationCreate,
    gate=Depends(require_role(Role.CREATOR)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    identity = gate.session.identity

    await rate_limit(
        db=db,
        key=f"application:{identity.subject}",
        max_requests=APPLICATION_RATE_LIMIT,
        window_seconds=APPLICATION_RATE_WINDOW_SECONDS,
    )

    try:
        application_id = await submit_application(db, identity, data)
    except PyMongoError:
        logger.exception("APPLICATION_SUBMIT_ERROR creator=%s", identity.subject)
        raise HTTPException(
            status_code=500,
            detail="Sponsorship application failed. Please try again.",
        )

    await log_audit(
        db,
        actor_id=identity.subject,
        actor_role="creator",
        action="APPLICATION_SUBMITTED",
        metadata={"application_id": str(application_id), "option_count": len(data.selected_options)},
    )

    return {
        "message": "Sponsorship application submitted",
        "id": str(application_id),
        "status": "pending",
    }


@router.get("/applications")
async def my_applications(
    status: str = Query(STATUS_FILTER_ALL),
    gate=Depends(require_role(Role.CREATOR)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    status_filter = validate_status_filter(status)
    applications = await load_applications(
        db,
        {"creator_id": gate.session.identity.subject},
    )

    return application_list_response(applications, status_filter)


@router.patch("/applications/{application_id}/urls")
async def update_content_urls(
    application_id: str,
    data: ApplicationUrlsUpdate,
    gate=Depends(require_role(Role.CREATOR)),
    db=Depends(get_db),
):
    if not gate.allowed:
        return gate.response()

    oid = parse_object_id(application_id, "application id")
    identity = gate.session.identity

    try:
        urls = await set_application_urls(db, oid, identity, data)
    except PyMongoError:
        logger.exception("APPLICATION_URLS_ERROR application=%s", application_id)
        raise HTTPException(
            status_code=500,
            detail="Updating content URLs failed. Please try again.",
        )

    await log_audit(
        db,
        actor_id=identity.subject,
        actor_role="creator",
        action="APPLICATION_URLS_UPDATED",
        metadata={"application_id": application_id},
    )

    return {
        "message": "Content URLs updated",
        "id": application_id,
        **urls,
    }
