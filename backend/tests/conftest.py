"""Root conftest - shared test configuration."""

import json
import os

from tests.signing import ADMIN_ADDRESS, ADMIN_FID, SERVER_PRIVATE_KEY

# Ensure tests never touch a real database or signing key
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SIGNER_PRIVATE_KEY", SERVER_PRIVATE_KEY)
os.environ.setdefault("ADMIN_KEYS", json.dumps({str(ADMIN_FID): ADMIN_ADDRESS}))
os.environ.setdefault("LOG_FORMAT", "text")
