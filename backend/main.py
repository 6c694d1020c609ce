from dotenv import load_dotenv
load_dotenv()

import asyncio
import logging
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from database import get_db

# ENV
from config.env import ENV, CORS_ALLOWED_ORIGINS, LOG_LEVEL, validate_production_env
from config.constants import API_PREFIX

# ROUTES
from routes.auth import router as auth_router
from routes.seller import router as seller_router
from routes.creator import router as creator_router
from routes.public import router as public_router
from routes.admin import router as admin_router

# STARTUP
from utils.indexes import ensure_indexes
from workers.session_cleanup_worker import session_cleanup_worker

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

validate_production_env()
logger.info("ENV: %s", ENV)

app = FastAPI(
    title="Sponsor Match API",
    version="1.0.0",
    docs_url=None if ENV == "production" else "/docs",
    redoc_url=None if ENV == "production" else "/redoc",
    openapi_url=None if ENV == "production" else "/openapi.json",
)

# -----------------------------
# CORS
# -----------------------------

allowed_origins = [origin.strip() for origin in CORS_ALLOWED_ORIGINS if origin.strip()]
if not allowed_origins:
    allowed_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "X-Redirect-Reason", "Retry-After"],
)

# -----------------------------
# ROUTES
# -----------------------------

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(seller_router, prefix=API_PREFIX)
app.include_router(creator_router, prefix=API_PREFIX)
app.include_router(public_router, prefix=API_PREFIX)
app.include_router(admin_router, prefix=API_PREFIX)

# -----------------------------
# HEALTH CHECKS
# -----------------------------

@app.get("/api/health")
async def health():

    return {"status": "ok"}

@app.get("/api/health/db")
async def health_db(db=Depends(get_db)):
    await db.command("ping")
    return {"status": "mongodb connected"}

# -----------------------------
# STARTUP (ONE PLACE ONLY)
# -----------------------------

@app.on_event("startup")
async def startup():
    await ensure_indexes(get_db())
    asyncio.create_task(session_cleanup_worker())
