async def find_active_sellers(db, email: str) -> list:
    cursor = db.sellers.find({
        "google_email": email,
        "is_active": True,
    }).sort("created_at", 1)

    return [s async for s in cursor]
