"""
Pathshala API Configuration
Database, auth and slug settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "pathshala_db")

# Session tokens (shared secret with the identity provider)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Slug generation
SLUG_INSERT_ATTEMPTS = int(os.getenv("SLUG_INSERT_ATTEMPTS", "3"))

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
