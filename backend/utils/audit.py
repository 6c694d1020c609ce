import logging
from datetime import datetime

logger = logging.getLogger(__name__)

async def log_audit(
    db,
    actor_id: str | None,
    actor_role: str,
    action: str,
    metadata: dict | None = None
):
    try:
        await db.audit_logs.insert_one({
            "actor_id": actor_id,
            "actor_role": actor_role,
            "action": action,
            "metadata": metadata or {},
            "created_at": datetime.utcnow()
        })
    except Exception:
        # audit trail must never fail the request it describes
        logger.exception("AUDIT_WRITE_ERROR action=%s", action)
