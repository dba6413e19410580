from __future__ import annotations

import os

os.environ.setdefault("DATABASE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")
