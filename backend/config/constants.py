# backend/config/constants.py

# -----------------------------
# OAUTH PROVIDERS → ROLES
# -----------------------------

SELLER_OAUTH_PROVIDER = "google"      # allow-listed through the sellers collection
CREATOR_OAUTH_PROVIDER = "kakao"      # open registration, no allow-list

LOGIN_PROVIDERS = {
    SELLER_OAUTH_PROVIDER: "seller",
    CREATOR_OAUTH_PROVIDER: "creator",
}

UNAUTHORIZED_ERROR_CODE = "unauthorized"

# -----------------------------
# APPLICATIONS
# -----------------------------

APPLICATION_STATUSES = ("pending", "approved", "rejected")
STATUS_FILTER_ALL = "all"

APPLICATION_RATE_LIMIT = 5
APPLICATION_RATE_WINDOW_SECONDS = 60 * 10

# -----------------------------
# CATALOG
# -----------------------------

PRODUCT_SUGGEST_MIN_CHARS = 2
PRODUCT_SUGGEST_LIMIT = 5

# -----------------------------
# SESSIONS
# -----------------------------

SESSION_SWEEP_INTERVAL_SECONDS = 60 * 5

# -----------------------------
# HTTP
# -----------------------------

API_PREFIX = "/api"
