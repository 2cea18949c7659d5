# ABOUTME: Pytest hooks and shared fixtures. Sets SECRET_KEY for tests before app/config load.
# ABOUTME: Loads .env so integration tests have model credentials when run via pytest.

import os

from dotenv import load_dotenv

load_dotenv()

# Required by core.config before any test imports api.main.
os.environ.setdefault("SECRET_KEY", "test-secret-for-pytest")
