import asyncio
import logging
from datetime import datetime, timedelta

from config.constants import SESSION_SWEEP_INTERVAL_SECONDS
from config.env import SESSION_IDLE_MINUTES
from utils.sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)


async def sweep_idle_sessions(store: SessionStore, now: datetime | None = None) -> int:
    cutoff = (now or datetime.utcnow()) - timedelta(minutes=SESSION_IDLE_MINUTES)
    removed = await store.sweep(cutoff)
    if removed:
        logger.info("IDLE_SESSIONS_SWEPT count=%s remaining=%s", removed, len(store))
    return removed


async def session_cleanup_worker():
    store = get_session_store()

    while True:
        try:
            await sweep_idle_sessions(store)
        except Exception:
            logger.exception("SESSION_CLEANUP_ERROR")

        await asyncio.sleep(SESSION_SWEEP_INTERVAL_SECONDS)
