"""Global pytest configuration."""

import os

# Settings are read at import time by backend.app.main; point them at a
# throwaway database and keep development-only routes enabled.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
