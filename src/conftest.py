"""Test environment: must run before api.security reads its configuration."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
# bcrypt's minimum cost keeps hashing fast in tests
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.pop("MONGO_URL", None)
