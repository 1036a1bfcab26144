# globalvote/config.py
# Central place for settings, thresholds and constants
import os
from dotenv import load_dotenv

load_dotenv()

# --- Database Config ---
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB", "global_voting")
VOTERS_COLLECTION_NAME = "voters"
CANDIDATES_COLLECTION_NAME = "candidates"
VOTES_COLLECTION_NAME = "votes"
REVIEWS_COLLECTION_NAME = "reviews"

# --- Security & JWT Config ---
# In production, use secure, environment-variable-based secrets
SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_dev_only")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# development | production | test
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

# --- Identity documents ---
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads/documents")
# In production: use secure key management (Vault/KMS) and never hardcode keys.
KEY_FILE = os.getenv("KEY_FILE", "data/secret.key")

MAX_DOCUMENT_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_DOCUMENT_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "pdf"})
ALLOWED_DOCUMENT_CONTENT_TYPES = frozenset({
    "image/jpeg", "image/jpg", "image/png", "application/pdf",
})

DOCUMENT_TYPES = (
    "Passport",
    "National ID",
    "Citizenship Certificate",
    "Driving License",
    "Voter ID",
)

# Simulated verification: delay before the voter is marked verified
VERIFICATION_DELAY_SECONDS = float(os.getenv("VERIFICATION_DELAY_SECONDS", "2.0"))
VERIFICATION_MAX_ATTEMPTS = int(os.getenv("VERIFICATION_MAX_ATTEMPTS", "3"))
VERIFICATION_RETRY_BACKOFF_SECONDS = float(os.getenv("VERIFICATION_RETRY_BACKOFF_SECONDS", "1.0"))

# --- Review moderation ---
MIN_REVIEW_LENGTH = 10
MAX_REVIEW_LENGTH = 500

BANNED_WORDS = (
    "spam", "hate", "violence", "scam", "fake", "abusive", "fraud", "corrupt",
    "bribe", "illegal", "terrorist", "bomb", "kill", "murder", "death",
    "stupid", "idiot", "fool", "worthless", "useless", "garbage",
)

POSITIVE_WORDS = ("good", "excellent", "great", "amazing", "wonderful", "fantastic")
