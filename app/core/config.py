import os

# Detect environment (default to production)
ENV = os.getenv("APP_ENV", "production").lower()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./kanban.db")
REDIS_URL = os.getenv("REDIS_URL")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

# Blob root for imported attachments, served under /uploads
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

MAX_IMPORT_BYTES = int(os.getenv("MAX_IMPORT_BYTES", str(100 * 1024 * 1024)))
# Ceiling on any single archive entry once decompressed
MAX_ENTRY_BYTES = int(os.getenv("MAX_ENTRY_BYTES", str(100 * 1024 * 1024)))
ARCHIVE_EXTENSION = os.getenv("ARCHIVE_EXTENSION", ".boardarchive")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
    ).split(",")
    if o.strip()
]
