"""Service configuration read from environment variables."""

import os

# =============================================================================
# S3 Configuration
# =============================================================================
S3_ENDPOINT = os.getenv("S3_ENDPOINT", "https://nyc3.digitaloceanspaces.com")
S3_BUCKET = os.getenv("S3_BUCKET", "loan-documents")
S3_REGION = os.getenv("S3_REGION", "nyc3")
S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY")
S3_SECRET_KEY = os.getenv("S3_SECRET_KEY")

# Prefixes inside the bucket
GENERATED_DOCUMENT_PREFIX = os.getenv("GENERATED_DOCUMENT_PREFIX", "generated")
SESSION_RECORD_PREFIX = os.getenv("SESSION_RECORD_PREFIX", "prefill-sessions")

# =============================================================================
# Pre-fill session store: "memory" or "s3"
# =============================================================================
RECORD_STORE = os.getenv("RECORD_STORE", "memory").lower()

# =============================================================================
# Signing
# =============================================================================
SIGNING_EXPIRATION_DAYS = int(os.getenv("SIGNING_EXPIRATION_DAYS", "30"))

# =============================================================================
# Server
# =============================================================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
SERVICE_VERSION = "1.0.0"
