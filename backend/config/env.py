import os
from dotenv import load_dotenv

load_dotenv()

# =====================================================
# ENV
# =====================================================
ENV = os.getenv("ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# =====================================================
# DATABASE
# =====================================================
MONGO_URI = os.getenv("MONGO_URI") or os.getenv("MONGODB_URI")

# =====================================================
# SESSION TOKENS (issued by this API)
# =====================================================
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
SESSION_TOKEN_MINUTES = int(os.getenv("SESSION_TOKEN_MINUTES", 60 * 12))
SESSION_IDLE_MINUTES = int(os.getenv("SESSION_IDLE_MINUTES", 60 * 2))

# =====================================================
# IDENTITY PROVIDER (Supabase Auth)
# =====================================================
SUPABASE_URL = (os.getenv("SUPABASE_URL") or "").rstrip("/")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")
AUTH_CALLBACK_URL = os.getenv("AUTH_CALLBACK_URL", "http://localhost:3000/auth/callback")

# =====================================================
# REDIRECT TARGETS
# =====================================================
LOGIN_PATH = os.getenv("LOGIN_PATH", "/api/auth/login")
LANDING_PATH = os.getenv("LANDING_PATH", "/api/home")

# =====================================================
# ADMIN
# =====================================================
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY")

# =====================================================
# CORS
# =====================================================
CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")


def validate_production_env() -> None:
    if (ENV or "").lower() != "production":
        return

    required = {
        "JWT_SECRET": JWT_SECRET,
        "SUPABASE_URL": SUPABASE_URL,
        "SUPABASE_JWT_SECRET": SUPABASE_JWT_SECRET,
        "ADMIN_API_KEY": ADMIN_API_KEY,
        "MONGODB_URI": MONGO_URI,
    }

    invalid = []
    for key, value in required.items():
        val = (value or "").strip()
        if not val or val.startswith("CHANGE_THIS"):
            invalid.append(key)

    if invalid:
        raise RuntimeError(f"Production env misconfigured. Invalid keys: {', '.join(sorted(invalid))}")
