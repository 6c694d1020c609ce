import logging
from datetime import datetime, timedelta
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

async def rate_limit(
    db,
    key: str,
    max_requests: int,
    window_seconds: int,
):
    """Fixed-window counter stored in the rate_limits collection."""
    now = datetime.utcnow()
    window_start = now - timedelta(seconds=window_seconds)

    record = await db.rate_limits.find_one({"key": key})

    if record and record.get("window_started_at") and record["window_started_at"] >= window_start:
        if record.get("count", 0) >= max_requests:
            logger.info("RATE_LIMITED key=%s", key)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later.",
            )

        await db.rate_limits.update_one(
            {"key": key},
            {"$inc": {"count": 1}},
        )
        return

    # first request of a new window
    await db.rate_limits.update_one(
        {"key": key},
        {"$set": {"count": 1, "window_started_at": now}},
        upsert=True,
    )
